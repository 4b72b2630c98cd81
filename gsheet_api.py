##########################
# API Google Apps Script #
##########################

# Passerelle vers le script Google Apps Script déployé en application web.
# Lecture : GET ?action=getData  -> { success, data: { headers, rows } } (ou headers / rows à la racine)
# Ecriture : GET ?action=updateCell&row=..&col=..&value=..  -> { success } ou { success: false, error }
# Le script horodate lui-même les deux colonnes d'audit de la ligne modifiée ;
# on reproduit l'horodatage dans le miroir local sans relire la feuille.

import datetime
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import requests

from app_const import AIDE_CONNEXION, FORMAT_DATE_AFFICHAGE, FORMAT_HEURE_AUDIT, NB_COLONNES_AUDIT, TIMEOUT_HTTP
from app_erreurs import AbsencesError, BackendError, CellUpdateError, ConnectivityError, MalformedDataError
from app_utils import Cellule, safe_int, texte_cellule, typer_cellule
import tracer

# Etats de la passerelle
INACTIF = "idle"
CHARGEMENT = "loading"
PRET = "ready"
ECHEC = "failed"
MISE_A_JOUR = "updating"
ECHEC_PERIME = "failed_stale"

MESSAGE_LIGNES_INVALIDES = "Rows data structure is not recognized. Expected array of arrays."


@dataclass
class Dataset:
    entetes: List[Any]
    lignes: List[List[Any]]
    cellules: List[List[Cellule]] = field(default_factory=list)

    def __post_init__(self):
        if not self.cellules:
            self.cellules = [[typer_cellule(v) for v in ligne] for ligne in self.lignes]

    def __len__(self):
        return len(self.lignes)

    @property
    def largeur(self) -> int:
        return len(self.entetes)

    @property
    def colonnes_audit(self) -> Tuple[int, ...]:
        return tuple(range(self.largeur - NB_COLONNES_AUDIT, self.largeur))

    def contient(self, ligne) -> bool:
        return isinstance(ligne, int) and 0 <= ligne < len(self.lignes)

    def valeur(self, ligne: int, col: int):
        row = self.lignes[ligne]
        return row[col] if 0 <= col < len(row) else None

    def cellule(self, ligne: int, col: int) -> Cellule:
        row = self.cellules[ligne]
        return row[col] if col is not None and 0 <= col < len(row) else typer_cellule(None)

    def texte(self, ligne: int, col: int) -> str:
        return self.cellule(ligne, col).texte

    # Remplace la ligne en une seule affectation : la valeur modifiée et l'horodatage d'audit
    # ne sont jamais visibles séparément
    def modifier(self, ligne: int, col: int, val, audit: Tuple[int, ...] = (), instant: Optional[datetime.datetime] = None):
        nouvelle = list(self.lignes[ligne])
        largeur = max([len(nouvelle), col + 1] + [c + 1 for c in audit])
        nouvelle.extend([None] * (largeur - len(nouvelle)))
        nouvelle[col] = val
        if instant is not None and len(audit) == NB_COLONNES_AUDIT:
            nouvelle[audit[0]] = instant.strftime(FORMAT_DATE_AFFICHAGE)
            nouvelle[audit[1]] = instant.strftime(FORMAT_HEURE_AUDIT)
        cellules = [typer_cellule(v) for v in nouvelle]
        self.lignes[ligne] = nouvelle
        self.cellules[ligne] = cellules


@dataclass(frozen=True)
class ResultatEcriture:
    succes: bool
    erreur: Optional[CellUpdateError] = None


# Clé d'ordre des lignes / colonnes d'un objet indexé ({"0": [...], "1": [...]})
def _cles_ordonnees(d: dict):
    cles = list(d.keys())
    if all(safe_int(k) is not None for k in cles):
        return sorted(cles, key=lambda k: int(k))
    return cles

def _est_scalaire(v):
    return v is None or isinstance(v, (bool, int, float, str))

# Reconstruit une ligne : tableau direct ou objet indexé par numéro de colonne
def _normaliser_ligne(ligne) -> list:
    if isinstance(ligne, (list, tuple)):
        valeurs = list(ligne)
    elif isinstance(ligne, dict) and ligne:
        cles = list(ligne.keys())
        if all(safe_int(k) is not None and int(k) >= 0 for k in cles):
            largeur = max(int(k) for k in cles) + 1
            valeurs = [None] * largeur
            for k in cles:
                valeurs[int(k)] = ligne[k]
        else:
            valeurs = list(ligne.values())
    else:
        raise MalformedDataError(MESSAGE_LIGNES_INVALIDES)
    if not all(_est_scalaire(v) for v in valeurs):
        raise MalformedDataError(MESSAGE_LIGNES_INVALIDES)
    return valeurs

# Normalise les lignes renvoyées par le script en tableau de tableaux.
# Formes acceptées : tableau de tableaux, objet indexé par numéro de ligne, lignes elles-mêmes
# encodées en objets indexés par numéro de colonne. Toute autre forme lève MalformedDataError.
def normaliser_lignes(lignes, largeur: int = 0) -> list:
    if isinstance(lignes, (list, tuple)):
        brutes = list(lignes)
    elif isinstance(lignes, dict) and lignes:
        tracer.log("Lignes reçues sous forme d'objet, conversion en tableau", types=["gs"])
        brutes = [lignes[k] for k in _cles_ordonnees(lignes)]
    else:
        raise MalformedDataError("Invalid data format: rows must be an array or object")

    resultat = []
    for ligne in brutes:
        valeurs = _normaliser_ligne(ligne)
        if len(valeurs) < largeur:
            valeurs.extend([None] * (largeur - len(valeurs)))
        resultat.append(valeurs)
    return resultat

# Extrait {headers, rows} d'une réponse, que les champs soient sous "data" ou à la racine
def extraire_donnees(resultat: dict) -> dict:
    donnees = resultat.get("data")
    if donnees:
        if not isinstance(donnees, dict):
            raise MalformedDataError("No data in response - check Apps Script response format")
        if donnees.get("rows") is None:
            raise MalformedDataError("Invalid data format: rows must be an array or object")
        return {"headers": donnees.get("headers") or [], "rows": donnees.get("rows")}
    if "headers" in resultat or "rows" in resultat:
        rows = resultat.get("rows")
        return {"headers": resultat.get("headers") or [], "rows": [] if rows is None else rows}
    raise MalformedDataError("No data in response - check Apps Script response format")


class GatewaySheet:
    """Lecture / écriture de la feuille via le script Apps Script et miroir local du dataset."""

    def __init__(self, url: str, session: Optional[requests.Session] = None, timeout: float = TIMEOUT_HTTP,
                 audit: Optional[Tuple[int, int]] = None, horloge: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.audit = audit
        self.horloge = horloge
        self.etat = INACTIF
        self.dataset: Optional[Dataset] = None
        self.erreur: Optional[AbsencesError] = None
        self._verrou = threading.Lock()

    # Appel du script et contrôle de l'enveloppe { success, error }
    def _requete(self, params: dict) -> dict:
        try:
            reponse = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            tracer.erreur(f"Echec réseau {params.get('action')} : {e}")
            raise ConnectivityError(AIDE_CONNEXION) from e

        if not reponse.ok:
            raise BackendError(f"HTTP error! status: {reponse.status_code}")

        try:
            resultat = reponse.json()
        except ValueError as e:
            raise BackendError(
                "Google Apps Script did not return JSON. Check that the web app access is set to 'Anyone'"
            ) from e

        if not isinstance(resultat, dict):
            raise BackendError("Unexpected response from Google Apps Script")
        if not resultat.get("success"):
            raise BackendError(resultat.get("error") or "API returned success: false")
        return resultat

    def charger(self) -> Dataset:
        tracer.log(f"Chargement depuis {self.url}", types=["gs"])
        self.etat = CHARGEMENT
        try:
            resultat = self._requete({"action": "getData"})
            donnees = extraire_donnees(resultat)
            entetes = list(donnees["headers"])
            lignes = normaliser_lignes(donnees["rows"], len(entetes))
        except AbsencesError as e:
            with self._verrou:
                self.dataset = None
                self.erreur = e
                self.etat = ECHEC
            tracer.erreur(f"{type(e).__name__}: {e}")
            raise

        dataset = Dataset(entetes, lignes)
        with self._verrou:
            self.dataset = dataset
            self.erreur = None
            self.etat = PRET
        tracer.log(f"{len(lignes)} lignes, {len(entetes)} colonnes", types=["gs"])
        return dataset

    def _colonnes_audit(self, dataset: Dataset) -> Tuple[int, ...]:
        return tuple(self.audit) if self.audit is not None else dataset.colonnes_audit

    # Ecrit une cellule. L'échec est renvoyé dans le résultat, jamais levé,
    # pour que l'appelant garde le contexte d'édition.
    def ecrire_cellule(self, ligne: int, col: int, val) -> ResultatEcriture:
        dataset = self.dataset
        if dataset is None or not dataset.contient(ligne) or not (0 <= col < max(dataset.largeur, 1)):
            erreur = CellUpdateError(ligne, col, f"Cell ({ligne}, {col}) does not exist")
            return ResultatEcriture(False, erreur)

        tracer.log(f"updateCell row={ligne} col={col} value={val!r}", types=["gs"])
        self.etat = MISE_A_JOUR
        try:
            self._requete({"action": "updateCell", "row": ligne, "col": col, "value": texte_cellule(val)})
        except ConnectivityError:
            erreur = CellUpdateError(ligne, col,
                "Network error: Cannot connect to Google Apps Script. Verify the deployment URL is correct and accessible.")
        except BackendError as e:
            erreur = CellUpdateError(ligne, col, str(e) or "Failed to update cell")
        else:
            with self._verrou:
                dataset.modifier(ligne, col, val, audit=self._colonnes_audit(dataset), instant=self.horloge())
                self.erreur = None
                self.etat = PRET
            return ResultatEcriture(True)

        tracer.erreur(f"Echec updateCell ({ligne}, {col}) : {erreur}")
        self.erreur = erreur
        self.etat = ECHEC_PERIME
        return ResultatEcriture(False, erreur)
