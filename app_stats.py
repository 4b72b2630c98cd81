################
# Statistiques #
################

# Statistiques des absences recalculées sur l'ensemble du dataset (pas sur la vue filtrée),
# avec leurs propres filtres : période (bornes incluses) et équipe.

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import pandas as pd

from app_colonnes import RolesColonnes
from app_const import MOTIF_INCONNU
from app_utils import date_comparable, texte_cellule
from gsheet_api import Dataset
import tracer


@dataclass(frozen=True)
class FiltresStats:
    debut: Optional[str] = None
    fin: Optional[str] = None
    equipe: str = ""

    @property
    def avec_periode(self) -> bool:
        return bool(self.debut) or bool(self.fin)


@dataclass(frozen=True)
class GroupeMotif:
    nom: str
    nombre: int
    pourcentage: float


@dataclass(frozen=True)
class Statistiques:
    total: int
    filtre: int
    par_motif: List[GroupeMotif] = field(default_factory=list)

    def en_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(g.nom, g.nombre, g.pourcentage) for g in self.par_motif],
            columns=["Motif", "Nombre", "Pourcentage"],
        )


def _dans_periode(val, debut: Optional[str], fin: Optional[str]) -> bool:
    jour = date_comparable(val)
    if jour is None:
        return False
    if debut and jour < debut:
        return False
    if fin and jour > fin:
        return False
    return True

# Calcule le total, le nombre de lignes retenues et la répartition par motif.
# Une période explicite prime sur les dates sélectionnées dans les filtres de la grille ;
# ces dernières ne s'appliquent que si aucune borne n'est renseignée.
def calculer_statistiques(dataset: Dataset, roles: RolesColonnes, filtres: FiltresStats = None,
                          dates_selectionnees: Iterable[str] = ()) -> Statistiques:
    filtres = filtres or FiltresStats()
    if dataset is None or len(dataset) == 0:
        return Statistiques(0, 0, [])

    dates_selectionnees = set(dates_selectionnees or ())
    debut = date_comparable(filtres.debut) if filtres.debut else None
    fin = date_comparable(filtres.fin) if filtres.fin else None
    equipe = (filtres.equipe or "").strip().lower()

    motifs = []
    for i in range(len(dataset)):
        date_brute = dataset.valeur(i, roles.date)
        if filtres.avec_periode:
            if not _dans_periode(date_brute, debut, fin):
                continue
        elif dates_selectionnees and texte_cellule(date_brute) not in dates_selectionnees:
            continue
        if equipe and equipe not in dataset.texte(i, roles.equipe).strip().lower():
            continue
        motif = dataset.texte(i, roles.motif).strip() or MOTIF_INCONNU
        motifs.append(motif)

    filtre = len(motifs)
    groupes = []
    if motifs:
        comptes = pd.Series(motifs).groupby(pd.Series(motifs), sort=False).size()
        comptes = comptes.sort_values(ascending=False, kind="stable")
        groupes = [
            GroupeMotif(str(nom), int(nombre), round(100.0 * int(nombre) / filtre, 1))
            for nom, nombre in comptes.items()
        ]

    tracer.log(f"total {len(dataset)} retenues {filtre} motifs {len(groupes)}", types=["stats"])
    return Statistiques(len(dataset), filtre, groupes)

# Equipes proposées dans la recherche des statistiques
def equipes_connues(dataset: Dataset, roles: RolesColonnes) -> List[str]:
    if dataset is None:
        return []
    equipes = {dataset.texte(i, roles.equipe).strip() for i in range(len(dataset))}
    equipes.discard("")
    return sorted(equipes)
