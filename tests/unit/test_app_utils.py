"""Tests for app_utils: cell normalization and date handling."""

import datetime

import pandas as pd
import pytest

from app_utils import (
    TEMPOREL_DATE,
    TEMPOREL_HEURE,
    TEMPOREL_SIMPLE,
    GENRE_BOOLEEN,
    GENRE_NOMBRE,
    GENRE_TEXTE,
    GENRE_VIDE,
    Cellule,
    classifier_temporel,
    date_comparable,
    formater_cellule,
    formater_cellule_typee,
    formater_date,
    get_cellule_modifiee,
    normalize_text,
    texte_cellule,
    typer_cellule,
)


class TestTexteCellule:

    def test_none(self):
        assert texte_cellule(None) == ""

    def test_booleens(self):
        assert texte_cellule(True) == "true"
        assert texte_cellule(False) == "false"

    def test_flottant_entier(self):
        assert texte_cellule(3.0) == "3"

    def test_flottant(self):
        assert texte_cellule(2.5) == "2.5"

    def test_nan(self):
        assert texte_cellule(float("nan")) == ""


class TestFormaterDate:

    def test_instant_iso(self):
        assert formater_date("2025-01-10T00:00:00Z") == "10/01/2025"

    def test_jour_de_la_chaine_conserve(self):
        # Pas de conversion de fuseau pour l'affichage
        assert formater_date("2025-11-16T23:00:00.000Z") == "16/11/2025"

    def test_date_seule(self):
        assert formater_date("2025-03-04") == "04/03/2025"

    def test_deja_formatee(self):
        assert formater_date("10/01/2025") == "10/01/2025"

    def test_texte_libre(self):
        assert formater_date("hello") == "hello"

    def test_date_iso_invalide(self):
        assert formater_date("2025-02-31") == "2025-02-31"


class TestFormaterCellule:

    @pytest.mark.parametrize("val", [
        None, "", "  ", "2025-01-10T00:00:00Z", "2025-01-10", "10/01/2025",
        "08:30:00", "Sick", 0, 3.0, True, False,
    ])
    def test_idempotent(self, val):
        once = formater_cellule(val)
        assert formater_cellule(once) == once

    def test_heure_inchangee(self):
        assert formater_cellule("08:30:00") == "08:30:00"

    def test_vide_remplace(self):
        assert formater_cellule(None, vide="-") == "-"
        assert formater_cellule("   ", vide="-") == "-"

    def test_zero_et_faux_affiches(self):
        assert formater_cellule(0, vide="-") == "0"
        assert formater_cellule(False, vide="-") == "false"

    def test_affichage_suit_etiquette_temporelle(self):
        assert formater_cellule_typee(Cellule(GENRE_TEXTE, "2025-01-10", TEMPOREL_DATE)) == "10/01/2025"
        # Etiquette "simple" : la valeur est affichée telle quelle, sans reclassement
        assert formater_cellule_typee(Cellule(GENRE_TEXTE, "2025-01-10", TEMPOREL_SIMPLE)) == "2025-01-10"
        assert formater_cellule_typee(Cellule(GENRE_TEXTE, "08:30:00", TEMPOREL_HEURE)) == "08:30:00"

    def test_cellule_vide_typee(self):
        assert formater_cellule_typee(typer_cellule(None), vide="-") == "-"
        assert formater_cellule_typee(typer_cellule(0), vide="-") == "0"


class TestClassifierTemporel:

    def test_heure(self):
        assert classifier_temporel("08:30:00") == TEMPOREL_HEURE

    def test_dates(self):
        assert classifier_temporel("2025-01-10") == TEMPOREL_DATE
        assert classifier_temporel("2025-01-10T00:00:00Z") == TEMPOREL_DATE
        assert classifier_temporel("10/01/2025") == TEMPOREL_DATE

    def test_simple(self):
        assert classifier_temporel("Sick") == TEMPOREL_SIMPLE
        assert classifier_temporel(5) == TEMPOREL_SIMPLE
        assert classifier_temporel("8:30") == TEMPOREL_SIMPLE


class TestDateComparable:

    def test_instant_utc(self):
        assert date_comparable("2025-11-16T23:00:00.000Z") == "2025-11-16"

    def test_instant_avec_decalage(self):
        # 01:00 à +02:00 correspond à la veille en UTC
        assert date_comparable("2025-11-16T01:00:00+02:00") == "2025-11-15"

    def test_saisie_iso(self):
        assert date_comparable("2025-01-05") == "2025-01-05"

    def test_date_affichage(self):
        assert date_comparable("05/01/2025") == "2025-01-05"
        assert date_comparable("5/1/2025") == "2025-01-05"

    def test_objets_date(self):
        assert date_comparable(datetime.date(2025, 1, 5)) == "2025-01-05"
        assert date_comparable(datetime.datetime(2025, 1, 5, 10, 0)) == "2025-01-05"

    @pytest.mark.parametrize("val", ["31/02/2025", "abc", "", None, "2025-13-01"])
    def test_non_interpretable(self, val):
        assert date_comparable(val) is None


class TestTyperCellule:

    def test_vide(self):
        assert typer_cellule(None).genre == GENRE_VIDE
        assert typer_cellule("  ").est_vide

    def test_booleen(self):
        assert typer_cellule(True).genre == GENRE_BOOLEEN

    def test_nombre(self):
        c = typer_cellule(3)
        assert c.genre == GENRE_NOMBRE
        assert c.texte == "3"

    def test_texte_heure(self):
        c = typer_cellule("08:30:00")
        assert c.genre == GENRE_TEXTE
        assert c.temporel == TEMPOREL_HEURE


def test_normalize_text():
    assert normalize_text("  Nom et  Prénom ") == "nom et prenom"
    assert normalize_text(None) == ""


class TestGetCelluleModifiee:

    def _df(self, valeurs):
        return pd.DataFrame({"__index": [3, 5], "c6": valeurs, "c7": ["x", "y"]})

    def test_modification_detectee(self):
        avant = self._df(["", ""])
        apres = self._df(["", "Approved"])
        assert get_cellule_modifiee(avant, apres, ["c6", "c7"]) == (5, "c6", "Approved")

    def test_aucune_modification(self):
        avant = self._df(["a", "b"])
        assert get_cellule_modifiee(avant, avant.copy(), ["c6", "c7"]) is None

    def test_champ_non_surveille(self):
        avant = self._df(["", ""])
        apres = avant.copy()
        apres.loc[0, "c7"] = "changed"
        assert get_cellule_modifiee(avant, apres, ["c6"]) is None

    def test_grille_vide(self):
        assert get_cellule_modifiee(self._df(["", ""]), pd.DataFrame(), ["c6"]) is None
