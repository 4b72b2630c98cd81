###########################
# Utilitaires application #
###########################

import datetime
import re
import unicodedata
from dataclasses import dataclass
from typing import Any

import pandas as pd

from app_const import FORMAT_DATE_AFFICHAGE

RE_HEURE = re.compile(r"^\d{2}:\d{2}:\d{2}$")
RE_DATE_AFFICHAGE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
RE_DATE_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:$|[T ])")
RE_DATE_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
RE_FUSEAU = re.compile(r"T.*(Z|[+-]\d{2}:?\d{2})$")

TEMPOREL_DATE = "date"
TEMPOREL_HEURE = "heure"
TEMPOREL_SIMPLE = "simple"

GENRE_VIDE = "vide"
GENRE_BOOLEEN = "booleen"
GENRE_NOMBRE = "nombre"
GENRE_TEXTE = "texte"

# Normalise un texte pour faciliter les comparaisons :
# enlève tous ce qui n'est pas ascii,
# décompose les caractères accentués (é -> e+)
# strip() + lower()
def normalize_text(txt: str) -> str:
    if not isinstance(txt, str):
        return ""
    # minuscules + sans accents + espaces compactés
    t = unicodedata.normalize("NFD", txt).encode("ascii", "ignore").decode("ascii")
    t = re.sub(r"\s+", " ", t.strip().lower())
    return t

# Cast en int sûr
def safe_int(val, default=None):
    try:
        return int(val)
    except (ValueError, TypeError):
        return default

# Renvoie la forme texte canonique d'une valeur brute de cellule
# None -> "", booléens -> "true" / "false", flottants entiers sans ".0"
def texte_cellule(val) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float):
        if val != val:  # NaN
            return ""
        if val.is_integer():
            return str(int(val))
    return str(val)

# Renvoie une date du calendrier si (a, m, j) est valide, None sinon
def _date_sure(a, m, j):
    try:
        return datetime.date(int(a), int(m), int(j))
    except (ValueError, TypeError):
        return None

# Classe une valeur selon son interprétation temporelle déduite de la forme de la chaîne
def classifier_temporel(val) -> str:
    if not isinstance(val, str):
        return TEMPOREL_SIMPLE
    s = val.strip()
    if RE_HEURE.match(s):
        return TEMPOREL_HEURE
    if RE_DATE_ISO.match(s) or RE_DATE_AFFICHAGE.match(s):
        return TEMPOREL_DATE
    return TEMPOREL_SIMPLE

# Renvoie val au format JJ/MM/AAAA si c'est une date ISO (date seule ou date-heure).
# Le jour du calendrier écrit dans la chaîne est conservé tel quel, sans conversion de fuseau.
# Toute autre valeur est renvoyée sous sa forme texte.
def formater_date(val) -> str:
    s = texte_cellule(val).strip()
    if not s or RE_DATE_AFFICHAGE.match(s):
        return s
    m = RE_DATE_ISO.match(s)
    if m:
        d = _date_sure(*m.groups())
        if d is not None:
            return d.strftime(FORMAT_DATE_AFFICHAGE)
    return s

# Renvoie le texte à afficher pour une cellule typée, d'après son étiquette temporelle
# posée à la normalisation : date -> JJ/MM/AAAA, heure et simple -> forme texte
def formater_cellule_typee(cellule, vide="") -> str:
    if cellule.est_vide:
        return vide
    if cellule.temporel == TEMPOREL_DATE:
        return formater_date(cellule.valeur)
    return cellule.texte

# Renvoie le texte à afficher pour une valeur brute (saisie en cours, options de filtre)
def formater_cellule(val, entete=None, vide="") -> str:
    return formater_cellule_typee(typer_cellule(val), vide)

# Renvoie une date comparable AAAA-MM-JJ à partir d'un instant ISO (date UTC),
# d'une saisie AAAA-MM-JJ ou d'une date d'affichage JJ/MM/AAAA, None si non interprétable
def date_comparable(val):
    if isinstance(val, datetime.datetime):
        return val.date().isoformat()
    if isinstance(val, datetime.date):
        return val.isoformat()

    s = texte_cellule(val).strip()
    if not s:
        return None

    # Instant ISO avec fuseau (2025-11-16T23:00:00.000Z)
    if RE_FUSEAU.search(s):
        ts = pd.to_datetime(s, utc=True, errors="coerce")
        if pd.isna(ts):
            return None
        return ts.strftime("%Y-%m-%d")

    # Saisie AAAA-MM-JJ ou date-heure sans fuseau
    m = RE_DATE_ISO.match(s)
    if m:
        d = _date_sure(*m.groups())
        return d.isoformat() if d else None

    # Date d'affichage JJ/MM/AAAA
    m = RE_DATE_SLASH.match(s)
    if m:
        j, mois, a = m.groups()
        d = _date_sure(a, mois, j)
        return d.isoformat() if d else None

    return None

@dataclass(frozen=True)
class Cellule:
    genre: str                      # 'vide' | 'booleen' | 'nombre' | 'texte'
    valeur: Any = None
    temporel: str = TEMPOREL_SIMPLE # 'date' | 'heure' | 'simple'

    @property
    def texte(self) -> str:
        return texte_cellule(self.valeur)

    @property
    def est_vide(self) -> bool:
        return self.genre == GENRE_VIDE

# Construit la variante typée d'une valeur brute (calculée une seule fois à la normalisation)
def typer_cellule(val) -> Cellule:
    if val is None:
        return Cellule(GENRE_VIDE)
    if isinstance(val, bool):
        return Cellule(GENRE_BOOLEEN, val)
    if isinstance(val, (int, float)):
        if isinstance(val, float) and val != val:
            return Cellule(GENRE_VIDE)
        return Cellule(GENRE_NOMBRE, val)
    if not isinstance(val, str):
        val = str(val)
    if val.strip() == "":
        return Cellule(GENRE_VIDE, val)
    return Cellule(GENRE_TEXTE, val, classifier_temporel(val))

# Renvoie (index d'origine, champ, nouvelle valeur) de la première cellule modifiée entre
# df_avant (envoyé à la grille) et df_apres (renvoyé par la grille), None si aucune.
# Les deux DataFrames portent l'index d'origine des lignes dans la colonne __index.
def get_cellule_modifiee(df_avant, df_apres, champs):
    if df_avant is None or df_apres is None or df_apres.empty or "__index" not in df_apres.columns:
        return None
    avant = df_avant.set_index("__index")
    for _, row in df_apres.iterrows():
        idx = safe_int(row["__index"])
        if idx is None or idx not in avant.index:
            continue
        for champ in champs:
            if champ not in row.index:
                continue
            val_avant = avant.at[idx, champ]
            val_apres = row[champ]
            if pd.isna(val_avant) and pd.isna(val_apres):
                continue
            if texte_cellule(None if pd.isna(val_avant) else val_avant) != texte_cellule(None if pd.isna(val_apres) else val_apres):
                return idx, champ, val_apres
    return None
