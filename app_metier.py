####################
# Core application #
####################

# Contrôleur de la grille : édition d'une cellule, sélection de lignes et modification groupée.
# L'état est un objet immuable ; chaque fonction renvoie un nouvel état.
# Seules confirmer_edition et appliquer_bulk font des appels réseau (via la passerelle).
# Les lignes sont toujours désignées par leur index d'origine dans le dataset, jamais par leur
# position dans la vue filtrée.

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Tuple

from app_colonnes import RolesColonnes
from app_const import MODE_CONSULTATION, MODE_EDITION, MODE_CONFIRMATION
from app_utils import texte_cellule
from gsheet_api import Dataset, GatewaySheet, ResultatEcriture
import tracer


@dataclass(frozen=True)
class SessionEdition:
    ligne: int
    col: int
    valeur_initiale: object
    saisie: str
    mode: str = MODE_EDITION

    @property
    def modifiee(self) -> bool:
        return texte_cellule(self.saisie) != texte_cellule(self.valeur_initiale)


@dataclass(frozen=True)
class SessionBulk:
    col: int
    valeur: str = ""


@dataclass(frozen=True)
class EtatGrille:
    edition: Optional[SessionEdition] = None
    bulk: Optional[SessionBulk] = None
    selection: frozenset = field(default_factory=frozenset)
    erreurs: Dict[Tuple[int, int], str] = field(default_factory=dict)

    @property
    def mode(self) -> str:
        return self.edition.mode if self.edition is not None else MODE_CONSULTATION

    def erreur(self, ligne: int, col: int) -> Optional[str]:
        return self.erreurs.get((ligne, col))

    # Messages d'échec regroupés par ligne d'origine : { ligne: { col: message } }
    def erreurs_par_ligne(self) -> Dict[int, Dict[int, str]]:
        par_ligne = {}
        for (ligne, col), message in sorted(self.erreurs.items()):
            par_ligne.setdefault(ligne, {})[col] = message
        return par_ligne


@dataclass(frozen=True)
class BilanBulk:
    succes: int = 0
    echecs: int = 0


def peut_editer(roles: RolesColonnes, col) -> bool:
    return isinstance(col, int) and roles.est_editable(col)

def _sans_erreur(erreurs, cle):
    return {k: v for k, v in erreurs.items() if k != cle}

def _avec_erreur(erreurs, cle, message):
    d = dict(erreurs)
    d[cle] = message
    return d


######################
# Edition de cellule #
######################

# Ouvre l'édition d'une cellule. Refusée (état inchangé) pour une colonne en lecture seule,
# un index inconnu, une modification groupée ouverte ou une confirmation en attente.
def entrer_edition(etat: EtatGrille, dataset: Dataset, roles: RolesColonnes, ligne: int, col: int) -> EtatGrille:
    if dataset is None or not dataset.contient(ligne) or not peut_editer(roles, col):
        tracer.log(f"Edition refusée ({ligne}, {col})", types=["edition"])
        return etat
    if etat.bulk is not None or etat.mode == MODE_CONFIRMATION:
        tracer.log(f"Edition refusée ({ligne}, {col}) : opération en cours", types=["edition"])
        return etat
    valeur = dataset.valeur(ligne, col)
    session = SessionEdition(ligne, col, valeur, texte_cellule(valeur))
    tracer.log(f"Edition ({ligne}, {col}) valeur {valeur!r}", types=["edition"])
    return replace(etat, edition=session, erreurs={})

def saisir_edition(etat: EtatGrille, saisie) -> EtatGrille:
    if etat.mode != MODE_EDITION:
        return etat
    return replace(etat, edition=replace(etat.edition, saisie=texte_cellule(saisie)))

# Entrée, perte de focus ou bouton de validation :
# valeur inchangée -> fermeture sans écriture, sinon demande de confirmation
def demander_validation(etat: EtatGrille) -> EtatGrille:
    if etat.mode != MODE_EDITION:
        return etat
    if not etat.edition.modifiee:
        return replace(etat, edition=None)
    return replace(etat, edition=replace(etat.edition, mode=MODE_CONFIRMATION))

# Echap ou confirmation refusée : aucune écriture
def annuler_edition(etat: EtatGrille) -> EtatGrille:
    if etat.edition is None:
        return etat
    tracer.log(f"Edition annulée ({etat.edition.ligne}, {etat.edition.col})", types=["edition"])
    return replace(etat, edition=None)

# Ecrit la valeur confirmée. La session est fermée dans tous les cas ;
# en cas d'échec l'erreur est rattachée à la cellule (index d'origine, colonne).
def confirmer_edition(etat: EtatGrille, gateway: GatewaySheet) -> Tuple[EtatGrille, Optional[ResultatEcriture]]:
    if etat.mode != MODE_CONFIRMATION:
        return etat, None
    s = etat.edition
    resultat = gateway.ecrire_cellule(s.ligne, s.col, s.saisie)
    cle = (s.ligne, s.col)
    if resultat.succes:
        tracer.log(f"Cellule ({s.ligne}, {s.col}) : {s.valeur_initiale!r} -> {s.saisie!r}", types=["edition"])
        return replace(etat, edition=None, erreurs=_sans_erreur(etat.erreurs, cle)), resultat
    return replace(etat, edition=None, erreurs=_avec_erreur(etat.erreurs, cle, resultat.erreur.message)), resultat


#############
# Sélection #
#############

def basculer_selection(etat: EtatGrille, ligne: int) -> EtatGrille:
    selection = set(etat.selection)
    if ligne in selection:
        selection.discard(ligne)
    else:
        selection.add(ligne)
    return replace(etat, selection=frozenset(selection))

# "Tout sélectionner" : exactement les lignes actuellement visibles
def selectionner_visibles(etat: EtatGrille, visibles: Iterable) -> EtatGrille:
    return replace(etat, selection=frozenset(v.index_origine for v in visibles))

def vider_selection(etat: EtatGrille) -> EtatGrille:
    return replace(etat, selection=frozenset(), bulk=None)

# Reporte l'état des cases à cocher de la grille (lignes visibles uniquement) dans la sélection.
# Les lignes sélectionnées masquées par un filtre restent sélectionnées.
def fusionner_selection_grille(etat: EtatGrille, indices_visibles: Iterable[int], indices_coches: Iterable[int]) -> EtatGrille:
    visibles = frozenset(indices_visibles)
    coches = frozenset(indices_coches) & visibles
    selection = (etat.selection - visibles) | coches
    if selection == etat.selection:
        return etat
    tracer.log(f"Sélection {sorted(selection)}", types=["selection"])
    return replace(etat, selection=selection)


########################
# Modification groupée #
########################

def ouvrir_bulk(etat: EtatGrille, roles: RolesColonnes, col: int) -> EtatGrille:
    if not etat.selection or not peut_editer(roles, col):
        return etat
    if etat.bulk is not None or etat.edition is not None:
        return etat
    tracer.log(f"Modification groupée colonne {col} sur {len(etat.selection)} lignes", types=["bulk"])
    return replace(etat, bulk=SessionBulk(col))

def saisir_bulk(etat: EtatGrille, valeur) -> EtatGrille:
    if etat.bulk is None:
        return etat
    return replace(etat, bulk=replace(etat.bulk, valeur=texte_cellule(valeur)))

def annuler_bulk(etat: EtatGrille) -> EtatGrille:
    return replace(etat, bulk=None)

# Une écriture par ligne sélectionnée, l'une après l'autre par index d'origine croissant.
# Un échec n'interrompt pas la suite. La sélection et la session sont vidées à la fin.
def appliquer_bulk(etat: EtatGrille, gateway: GatewaySheet) -> Tuple[EtatGrille, BilanBulk]:
    if etat.bulk is None or not etat.selection:
        return etat, BilanBulk()
    col, valeur = etat.bulk.col, etat.bulk.valeur
    erreurs = dict(etat.erreurs)
    succes = echecs = 0
    for ligne in sorted(etat.selection):
        resultat = gateway.ecrire_cellule(ligne, col, valeur)
        if resultat.succes:
            succes += 1
            erreurs.pop((ligne, col), None)
        else:
            echecs += 1
            erreurs[(ligne, col)] = resultat.erreur.message
    tracer.log(f"Colonne {col} = {valeur!r} : {succes} succès, {echecs} échecs", types=["bulk"])
    return replace(etat, bulk=None, selection=frozenset(), erreurs=erreurs), BilanBulk(succes, echecs)


# Après un rechargement : retire de l'état les lignes qui n'existent plus dans le dataset
def elaguer(etat: EtatGrille, dataset: Dataset) -> EtatGrille:
    if dataset is None:
        return EtatGrille()
    selection = frozenset(i for i in etat.selection if dataset.contient(i))
    erreurs = {k: v for k, v in etat.erreurs.items() if dataset.contient(k[0])}
    edition = etat.edition if etat.edition is not None and dataset.contient(etat.edition.ligne) else None
    bulk = etat.bulk if selection else None
    if (selection, erreurs, edition, bulk) == (etat.selection, etat.erreurs, etat.edition, etat.bulk):
        return etat
    tracer.log(f"Etat élagué à {len(dataset)} lignes", types=["selection"])
    return EtatGrille(edition=edition, bulk=bulk, selection=selection, erreurs=erreurs)
