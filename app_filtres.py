#####################
# Moteur de filtres #
#####################

# L'état des filtres est un objet immuable ; chaque action utilisateur produit un nouvel état.
# La porte catégorielle (finca) n'en fait pas partie : elle est toujours appliquée.

import datetime
from dataclasses import dataclass, field, replace
from typing import List, Optional

from app_colonnes import RolesColonnes
from app_const import VALEUR_PORTE
from app_utils import date_comparable, formater_date
from gsheet_api import Dataset
from traductions import nom_mois
import tracer


@dataclass(frozen=True)
class EtatFiltres:
    nom: str = ""
    dates: frozenset = field(default_factory=frozenset)
    equipe: Optional[str] = None
    motif: Optional[str] = None

    @property
    def est_vide(self) -> bool:
        return not self.nom and not self.dates and not self.equipe and not self.motif


@dataclass(frozen=True)
class LigneVisible:
    ligne: list
    index_origine: int


@dataclass(frozen=True)
class GroupeMois:
    annee: int
    mois: int
    libelle: str
    dates: tuple


##################
# Transitions    #
##################

def avec_nom(etat: EtatFiltres, nom: str) -> EtatFiltres:
    return replace(etat, nom=nom or "")

def avec_dates(etat: EtatFiltres, dates) -> EtatFiltres:
    return replace(etat, dates=frozenset(dates or ()))

def basculer_date(etat: EtatFiltres, date: str) -> EtatFiltres:
    dates = set(etat.dates)
    if date in dates:
        dates.discard(date)
    else:
        dates.add(date)
    return replace(etat, dates=frozenset(dates))

# Coche toutes les dates d'un mois, ou les décoche toutes si elles étaient déjà toutes cochées
def basculer_mois(etat: EtatFiltres, dates_mois) -> EtatFiltres:
    dates_mois = list(dates_mois)
    dates = set(etat.dates)
    if dates_mois and all(d in dates for d in dates_mois):
        dates.difference_update(dates_mois)
    else:
        dates.update(dates_mois)
    return replace(etat, dates=frozenset(dates))

def avec_equipe(etat: EtatFiltres, equipe: Optional[str]) -> EtatFiltres:
    return replace(etat, equipe=equipe or None)

def avec_motif(etat: EtatFiltres, motif: Optional[str]) -> EtatFiltres:
    return replace(etat, motif=motif or None)

def effacer_filtres(etat: EtatFiltres = None) -> EtatFiltres:
    return EtatFiltres()

def mois_partiellement_coche(etat: EtatFiltres, dates_mois) -> bool:
    coches = [d in etat.dates for d in dates_mois]
    return any(coches) and not all(coches)


##################
# Calculs        #
##################

# Indique si la ligne passe la porte catégorielle (comparaison exacte sans tenir compte de la casse)
def passe_porte(dataset: Dataset, i: int, roles: RolesColonnes, valeur_porte: str = VALEUR_PORTE) -> bool:
    return dataset.texte(i, roles.site).upper() == valeur_porte.upper()

def _correspond(dataset: Dataset, i: int, roles: RolesColonnes, filtres: EtatFiltres) -> bool:
    if filtres.dates and dataset.texte(i, roles.date) not in filtres.dates:
        return False
    if filtres.equipe and dataset.texte(i, roles.equipe) != filtres.equipe:
        return False
    if filtres.motif and dataset.texte(i, roles.motif) != filtres.motif:
        return False
    if filtres.nom and filtres.nom.lower() not in dataset.texte(i, roles.nom).lower():
        return False
    return True

# Renvoie les lignes visibles dans l'ordre d'origine avec leur index d'origine
def calculer_visibles(dataset: Dataset, roles: RolesColonnes, filtres: EtatFiltres,
                      valeur_porte: str = VALEUR_PORTE) -> List[LigneVisible]:
    if dataset is None:
        return []
    visibles = [
        LigneVisible(dataset.lignes[i], i)
        for i in range(len(dataset))
        if passe_porte(dataset, i, roles, valeur_porte) and _correspond(dataset, i, roles, filtres)
    ]
    tracer.log(f"{len(visibles)} / {len(dataset)} lignes visibles", types=["filtres"])
    return visibles

# Valeurs distinctes non vides d'une colonne parmi les lignes passant la porte, triées
def valeurs_distinctes(dataset: Dataset, roles: RolesColonnes, role: str,
                       valeur_porte: str = VALEUR_PORTE) -> List[str]:
    col = roles.index(role)
    if dataset is None or col is None:
        return []
    valeurs = set()
    for i in range(len(dataset)):
        if passe_porte(dataset, i, roles, valeur_porte):
            cellule = dataset.cellule(i, col)
            if not cellule.est_vide and cellule.texte:
                valeurs.add(cellule.texte)
    return sorted(valeurs)

# Regroupe des dates brutes par mois du calendrier :
# mois du plus récent au plus ancien, dates du mois de la plus récente à la plus ancienne
def grouper_dates_par_mois(dates, langue: str) -> List[GroupeMois]:
    groupes = {}
    for brute in dates:
        iso = date_comparable(brute)
        if iso is None:
            continue
        jour = datetime.date.fromisoformat(iso)
        groupes.setdefault((jour.year, jour.month), []).append((jour, brute))

    resultat = []
    for (annee, mois) in sorted(groupes, reverse=True):
        triees = sorted(groupes[(annee, mois)], key=lambda x: (x[0], str(x[1])), reverse=True)
        resultat.append(GroupeMois(annee, mois, nom_mois(mois, annee, langue), tuple(b for _, b in triees)))
    return resultat

# Filtre les groupes de mois par une recherche sur la date affichée ou le libellé du mois
def rechercher_dates(groupes: List[GroupeMois], requete: str) -> List[GroupeMois]:
    requete = (requete or "").strip().lower()
    if not requete:
        return groupes
    resultat = []
    for g in groupes:
        if requete in g.libelle.lower():
            resultat.append(g)
            continue
        dates = tuple(d for d in g.dates if requete in formater_date(d).lower())
        if dates:
            resultat.append(replace(g, dates=dates))
    return resultat

# Filtre les options d'une liste déroulante par sous-chaîne sans tenir compte de la casse
def filtrer_options(options: List[str], recherche: str) -> List[str]:
    if not recherche:
        return list(options)
    recherche = recherche.lower()
    return [o for o in options if recherche in o.lower()]
