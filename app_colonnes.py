#####################
# Rôles de colonnes #
#####################

# Les rôles des colonnes (finca, date, nom, code, equipe, motif, audit) sont résolus
# une seule fois par chargement à partir des entêtes de la feuille.
# Un rôle peut être fixé explicitement dans la configuration (nom d'entête ou index).
# A défaut, on applique l'heuristique de recherche de sous-chaîne sur l'entête normalisée
# (sans accents, minuscules) avec les marqueurs de app_const. Un rôle requis introuvable
# lève une ConfigurationError.

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from app_const import MARQUEURS_LECTURE_SEULE, MARQUEURS_FILTRES, ROLES_REQUIS, NB_COLONNES_AUDIT
from app_erreurs import ConfigurationError
from app_utils import normalize_text, texte_cellule
import tracer

ROLES = ["site", "date", "nom", "code", "equipe", "motif"]
ROLES_LECTURE_SEULE = ["site", "date", "nom", "code", "equipe"]


@dataclass(frozen=True)
class ConfigColonnes:
    roles: Dict[str, Union[str, int]] = field(default_factory=dict)
    audit: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class RolesColonnes:
    nb_colonnes: int
    indices: Dict[str, Optional[int]]
    lecture_seule: frozenset
    audit: Tuple[int, int]

    def index(self, role: str) -> Optional[int]:
        return self.indices.get(role)

    @property
    def site(self):
        return self.indices["site"]

    @property
    def date(self):
        return self.indices["date"]

    @property
    def nom(self):
        return self.indices["nom"]

    @property
    def equipe(self):
        return self.indices["equipe"]

    @property
    def motif(self):
        return self.indices["motif"]

    @property
    def audit_date(self):
        return self.audit[0]

    @property
    def audit_heure(self):
        return self.audit[1]

    def est_audit(self, col: int) -> bool:
        return col in self.audit

    def est_editable(self, col: int) -> bool:
        return 0 <= col < self.nb_colonnes and col not in self.lecture_seule

    def colonnes_visibles(self) -> list:
        return [c for c in range(self.nb_colonnes) if c not in self.audit]

    def colonnes_editables(self) -> list:
        return [c for c in self.colonnes_visibles() if self.est_editable(c)]


def _marqueurs(role):
    return MARQUEURS_LECTURE_SEULE.get(role) or MARQUEURS_FILTRES.get(role) or []

# Recherche heuristique : première entête dont le texte normalisé contient un marqueur du rôle
def _chercher_par_marqueur(entetes_norm, role):
    for i, h in enumerate(entetes_norm):
        if any(m in h for m in _marqueurs(role)):
            return i
    return None

# Résolution d'un rôle fixé explicitement dans la configuration
def _resoudre_explicite(entetes_norm, role, cible):
    if isinstance(cible, int) and not isinstance(cible, bool):
        if 0 <= cible < len(entetes_norm):
            return cible
        raise ConfigurationError(role, f"Column index {cible} for role '{role}' is out of range")
    cible_norm = normalize_text(str(cible))
    for i, h in enumerate(entetes_norm):
        if h == cible_norm:
            return i
    raise ConfigurationError(role, f"Column '{cible}' for role '{role}' not found in sheet headers")

def resoudre_roles(entetes, config: Optional[ConfigColonnes] = None) -> RolesColonnes:
    config = config or ConfigColonnes()
    entetes_norm = [normalize_text(texte_cellule(h)) for h in entetes]
    n = len(entetes_norm)

    indices = {}
    for role in ROLES:
        if role in config.roles:
            indices[role] = _resoudre_explicite(entetes_norm, role, config.roles[role])
        else:
            indices[role] = _chercher_par_marqueur(entetes_norm, role)
        if indices[role] is None and role in ROLES_REQUIS:
            raise ConfigurationError(role, f"Required column '{role}' could not be found in sheet headers")

    # Colonnes d'audit : les deux dernières colonnes sauf configuration explicite
    if config.audit is not None:
        audit = tuple(config.audit)
    else:
        audit = tuple(range(n - NB_COLONNES_AUDIT, n))
    if len(audit) != NB_COLONNES_AUDIT or any(not (0 <= c < n) for c in audit):
        raise ConfigurationError("audit", "The sheet needs two trailing audit columns (last edit date and time)")
    chevauchement = [r for r in ROLES if indices[r] is not None and indices[r] in audit]
    if chevauchement:
        raise ConfigurationError("audit", f"Audit columns overlap with role(s): {', '.join(chevauchement)}")

    lecture_seule = set(audit)
    for role in ROLES_LECTURE_SEULE:
        if indices[role] is not None:
            lecture_seule.add(indices[role])
    marqueurs = [m for role in ROLES_LECTURE_SEULE for m in MARQUEURS_LECTURE_SEULE[role]]
    for i, h in enumerate(entetes_norm):
        if any(m in h for m in marqueurs):
            lecture_seule.add(i)

    tracer.log(f"roles {indices} audit {audit} lecture seule {sorted(lecture_seule)}", types=["gs"])
    return RolesColonnes(
        nb_colonnes=n,
        indices=indices,
        lecture_seule=frozenset(lecture_seule),
        audit=audit,
    )
