##########################
# Constantes application #
##########################

# Feuille Google Sheet ciblée par le script Apps Script
NOM_FEUILLE = "ABSENCES"

# Porte catégorielle permanente : seules les lignes de cette finca sont affichées
VALEUR_PORTE = "FINCA 20"

# Marqueurs (normalisés sans accents, en minuscules) des colonnes en lecture seule
MARQUEURS_LECTURE_SEULE = {
    "site": ["finca"],
    "date": ["date"],
    "nom": ["nom et prenom"],
    "code": ["code"],
    "equipe": ["equipe"],
}

# Marqueurs des autres colonnes utilisées par les filtres et les statistiques
MARQUEURS_FILTRES = {
    "motif": ["motif"],
}

# Rôles devant impérativement être résolus au chargement
ROLES_REQUIS = ["site", "date", "nom", "equipe", "motif"]

# Nombre de colonnes d'audit en fin de feuille (date et heure de dernière modification)
NB_COLONNES_AUDIT = 2

FORMAT_DATE_AFFICHAGE = "%d/%m/%Y"
FORMAT_HEURE_AUDIT = "%H:%M:%S"

# Motif utilisé dans les statistiques quand la cellule est vide
MOTIF_INCONNU = "Unknown"

# Langues de l'interface
LANGUES = ("fr", "en")
LANGUE_DEFAUT = "fr"
CLE_LANGUE = "language"

# Requêtes HTTP
TIMEOUT_HTTP = 30
PORT_RELAIS = 8505
ROUTE_RELAIS = "/api/telegram-notify"
URL_API_TELEGRAM = "https://api.telegram.org"

# Texte d'aide affiché lorsque le script Apps Script est injoignable
AIDE_CONNEXION = (
    "Cannot reach Google Apps Script. Make sure: "
    "1) The deployment URL is correct, "
    "2) The script is deployed as a web app with 'Execute as' = your account and 'Who has access' = Anyone, "
    "3) You redeploy after making code changes"
)

# Etats de l'édition de cellule
MODE_CONSULTATION = "consultation"
MODE_EDITION = "edition"
MODE_CONFIRMATION = "confirmation"

LABEL_BOUTON_VALIDER = "Confirm"
LABEL_BOUTON_ANNULER = "Cancel"

CENTRER_BOUTONS = True

# Hauteur approximative d'une ligne AgGrid
LIGNE_PX = 32
HAUTEUR_MAX_GRILLE = 600
