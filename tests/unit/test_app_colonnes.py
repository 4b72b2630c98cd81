"""Tests for app_colonnes: column role resolution."""

import pytest

from app_colonnes import ConfigColonnes, resoudre_roles
from app_erreurs import ConfigurationError
from conftest import ENTETES


class TestResoudreRoles:

    def test_heuristique(self):
        roles = resoudre_roles(ENTETES)
        assert roles.site == 0
        assert roles.date == 1
        assert roles.index("code") == 2
        assert roles.nom == 3
        assert roles.equipe == 4
        assert roles.motif == 5

    def test_colonnes_audit_par_defaut(self):
        roles = resoudre_roles(ENTETES)
        assert roles.audit == (8, 9)
        assert roles.audit_date == 8
        assert roles.audit_heure == 9

    def test_lecture_seule(self):
        roles = resoudre_roles(ENTETES)
        for col in [0, 1, 2, 3, 4, 8, 9]:
            assert not roles.est_editable(col)
        assert roles.colonnes_editables() == [5, 6, 7]

    def test_colonnes_visibles_sans_audit(self):
        roles = resoudre_roles(ENTETES)
        assert roles.colonnes_visibles() == list(range(8))

    def test_entetes_accentuees_et_casse(self):
        entetes = ["FINCA", "date absence", "NOM ET PRENOM", "Équipe", "Motif d'absence", "ts_d", "ts_t"]
        roles = resoudre_roles(entetes)
        assert roles.equipe == 3
        assert roles.motif == 4
        assert roles.index("code") is None

    def test_role_requis_manquant(self):
        entetes = [h for h in ENTETES if h != "Motif"]
        with pytest.raises(ConfigurationError) as exc:
            resoudre_roles(entetes)
        assert exc.value.champ == "motif"

    def test_role_explicite_par_nom(self):
        roles = resoudre_roles(ENTETES, ConfigColonnes(roles={"motif": "Observation"}))
        assert roles.motif == 7

    def test_role_explicite_par_index(self):
        roles = resoudre_roles(ENTETES, ConfigColonnes(roles={"motif": 6}))
        assert roles.motif == 6

    def test_role_explicite_introuvable(self):
        with pytest.raises(ConfigurationError):
            resoudre_roles(ENTETES, ConfigColonnes(roles={"motif": "Raison"}))

    def test_index_hors_limites(self):
        with pytest.raises(ConfigurationError):
            resoudre_roles(ENTETES, ConfigColonnes(roles={"motif": 42}))

    def test_audit_chevauche_un_role(self):
        with pytest.raises(ConfigurationError) as exc:
            resoudre_roles(ENTETES, ConfigColonnes(audit=(4, 5)))
        assert exc.value.champ == "audit"

    def test_audit_explicite(self):
        entetes = ENTETES + ["Commentaire"]
        roles = resoudre_roles(entetes, ConfigColonnes(audit=(8, 9)))
        assert roles.audit == (8, 9)
        assert roles.est_editable(10)
