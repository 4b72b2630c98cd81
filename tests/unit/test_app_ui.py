"""Tests for app_ui: grid display frame, cell error reporting, filter options and statistics dialog helpers."""

import json
from unittest.mock import MagicMock

import pytest

import app_ui
from app_filtres import EtatFiltres, calculer_visibles
from app_metier import EtatGrille
from app_stats import FiltresStats, calculer_statistiques
from app_utils import GENRE_TEXTE, TEMPOREL_SIMPLE, Cellule


class EtatSession(dict):
    """Stand-in for st.session_state: dict with attribute access."""

    def __getattr__(self, cle):
        try:
            return self[cle]
        except KeyError:
            raise AttributeError(cle)

    def __setattr__(self, cle, valeur):
        self[cle] = valeur


@pytest.fixture
def visibles(dataset, roles):
    return calculer_visibles(dataset, roles, EtatFiltres(), "FINCA 20")


def ligne_df(df, index):
    return df[df["__index"] == index].iloc[0]


class TestCreerDfDisplay:

    def test_lignes_visibles_avec_index_d_origine(self, dataset, roles, visibles):
        df = app_ui.creer_df_display(dataset, roles, visibles, EtatGrille(selection=frozenset({2})))
        assert list(df["__index"]) == [0, 1, 2]
        assert list(df["__sel"]) == [False, False, True]

    def test_affichage_selon_etiquette_de_normalisation(self, dataset, roles, visibles):
        dataset.cellules[1][1] = Cellule(GENRE_TEXTE, "2025-01-11", TEMPOREL_SIMPLE)
        df = app_ui.creer_df_display(dataset, roles, visibles, EtatGrille())
        assert ligne_df(df, 0)["c1"] == "10/01/2025"
        assert ligne_df(df, 1)["c1"] == "2025-01-11"

    def test_messages_d_erreur_par_cellule(self, dataset, roles, visibles):
        etat = EtatGrille(erreurs={(1, 6): "Row locked", (1, 7): "Timeout"})
        df = app_ui.creer_df_display(dataset, roles, visibles, etat)
        assert json.loads(ligne_df(df, 1)["__erreurs"]) == {"c6": "Row locked", "c7": "Timeout"}
        assert ligne_df(df, 0)["__erreurs"] == ""


class TestErreursCellules:

    def test_raison_listee_pour_chaque_cellule(self, dataset, roles):
        etat = EtatGrille(erreurs={(0, 6): "Row locked"})
        assert app_ui.lister_erreurs_cellules(dataset, roles, etat, "en") == [
            "Row 1 · Jane Doe · 10/01/2025 · Autorisation : Row locked",
        ]

    def test_lignes_disparues_ignorees(self, dataset, roles):
        etat = EtatGrille(erreurs={(9, 6): "Row locked"})
        assert app_ui.lister_erreurs_cellules(dataset, roles, etat, "en") == []

    def test_libelle_traduit(self, dataset, roles):
        assert app_ui.libelle_ligne(dataset, roles, 1, "fr") == "Ligne 2 · John Smith · 11/01/2025"


class TestOptionsFiltre:

    def test_recherche_insensible_a_la_casse(self):
        assert app_ui.options_filtre(["A", "B", "Bravo"], "b", None, "All") == ["All", "B", "Bravo"]

    def test_sans_recherche(self):
        assert app_ui.options_filtre(["A", "B"], "", None, "All") == ["All", "A", "B"]

    def test_valeur_courante_conservee(self):
        assert app_ui.options_filtre(["Sick", "Vacances"], "vac", "Sick", "All") == ["All", "Sick", "Vacances"]


class TestDialogues:

    def test_titre_confirmation_traduit(self, monkeypatch):
        dialog = MagicMock()
        monkeypatch.setattr(app_ui.st, "dialog", dialog)
        app_ui.show_dialog_confirmer_modification(MagicMock(), "fr")
        assert dialog.call_args.args == ("Confirmer la modification",)

    def test_titre_statistiques_traduit(self, monkeypatch, dataset, roles):
        dialog = MagicMock()
        monkeypatch.setattr(app_ui.st, "dialog", dialog)
        app_ui.show_dialog_statistiques(dataset, roles, "fr")
        assert dialog.call_args.args == ("Statistiques des absences",)
        assert dialog.call_args.kwargs == {"width": "large"}


class TestStatistiques:

    def test_effacer_remet_les_champs_a_vide(self, monkeypatch):
        etat = EtatSession(
            filtres_stats=FiltresStats("2025-01-01", "2025-01-31", "A"),
            stats_debut="2025-01-01",
            stats_fin="2025-01-31",
            stats_equipe="A",
            grille=EtatGrille(),
        )
        monkeypatch.setattr(app_ui.st, "session_state", etat)
        app_ui.effacer_filtres_stats()
        assert etat.filtres_stats == FiltresStats()
        assert not any(cle in etat for cle in app_ui.CLES_FILTRES_STATS)
        assert "grille" in etat

    def test_camembert_par_motif(self, dataset, roles):
        df = calculer_statistiques(dataset, roles).en_dataframe()
        fig = app_ui.creer_camembert(df)
        assert fig.data[0].type == "pie"
        assert list(fig.data[0].labels) == ["Sick", "Vacances"]
        assert list(fig.data[0].values) == [3, 1]
