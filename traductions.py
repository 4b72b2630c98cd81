################
# Traductions  #
################

from app_const import LANGUES, LANGUE_DEFAUT

NOMS_MOIS = {
    "fr": ["janvier", "février", "mars", "avril", "mai", "juin",
           "juillet", "août", "septembre", "octobre", "novembre", "décembre"],
    "en": ["January", "February", "March", "April", "May", "June",
           "July", "August", "September", "October", "November", "December"],
}

TRADUCTIONS = {
    "en": {
        "ABSENCES": "Absence tracking",
        "Refresh": "Refresh",
        "Statistics": "Statistics",
        "Mark Complete": "Mark Complete",
        "Clear Filters": "Clear Filters",
        "Confirm": "Confirm",
        "Cancel": "Cancel",
        "Send to Telegram": "Send to Telegram",
        "Apply Filters": "Apply Filters",
        "Clear All": "Clear All",
        "Select All": "Select All",
        "Clear": "Clear",
        "Connect & Load Data": "Connect & Load Data",
        "Filters": "Filters",
        "All dates": "All dates",
        "All equipes": "All equipes",
        "All motifs": "All motifs",
        "Search Name": "Search name",
        "Search dates": "Search dates...",
        "No dates found": "No dates found",
        "dates selected": "date(s) selected",
        "Confirm Change": "Confirm Change",
        "Update from": "Update from",
        "to": "to",
        "Cell updated successfully": "Cell updated successfully",
        "Failed to update cell": "Failed to update cell",
        "Bulk edit": "Bulk edit",
        "Column": "Column",
        "New value": "New value",
        "Apply to selected rows": "Apply to selected rows",
        "rows selected": "row(s) selected",
        "Bulk Update Complete": "Bulk Update Complete",
        "Updated": "Updated",
        "failed": "failed",
        "Absence Statistics": "Absence Statistics",
        "Start Date": "Start Date",
        "End Date": "End Date",
        "Search Equipe": "Search Equipe",
        "Total Absences": "Total Absences",
        "In Selected Range": "In Selected Range",
        "Absence Types": "Absence Types",
        "Absence Type": "Absence Type",
        "Count": "Count",
        "Percentage": "Percentage",
        "No data available for the selected date range": "No data available for the selected date range",
        "Select Completion Date": "Select Completion Date",
        "Notification sent for": "Notification sent for",
        "Failed to send notification": "Failed to send notification",
        "Please select a date": "Please select a date",
        "Success": "Success",
        "Error": "Error",
        "Loading data...": "Loading data...",
        "Google Sheets Editor": "Google Sheets Editor",
        "Google Apps Script URL": "Google Apps Script URL",
        "Google Apps Script URL is required": "Google Apps Script URL is required",
        "Please enter a valid Google Apps Script deployment URL": "Please enter a valid Google Apps Script deployment URL",
        "Deploy your Google Apps Script as a web app and paste the deployment URL here":
            "Deploy your Google Apps Script as a web app and paste the deployment URL here",
        "Language": "Français",
        "Unknown": "Unknown",
        "Row": "Row",
        "failed cell update(s)": "failed cell update(s)",
        "Edit column": "Edit column",
        "selected row(s) hidden by filters": "selected row(s) hidden by filters",
        "Select shown": "Select shown",
        "Search Motif": "Search Motif",
    },
    "fr": {
        "ABSENCES": "Suivi des absences",
        "Refresh": "Actualiser",
        "Statistics": "Statistiques",
        "Mark Complete": "Marquer comme terminé",
        "Clear Filters": "Effacer les filtres",
        "Confirm": "Confirmer",
        "Cancel": "Annuler",
        "Send to Telegram": "Envoyer sur Telegram",
        "Apply Filters": "Appliquer les filtres",
        "Clear All": "Tout effacer",
        "Select All": "Tout sélectionner",
        "Clear": "Effacer",
        "Connect & Load Data": "Connecter et charger les données",
        "Filters": "Filtres",
        "All dates": "Toutes les dates",
        "All equipes": "Toutes les équipes",
        "All motifs": "Tous les motifs",
        "Search Name": "Rechercher un nom",
        "Search dates": "Rechercher une date...",
        "No dates found": "Aucune date trouvée",
        "dates selected": "date(s) sélectionnée(s)",
        "Confirm Change": "Confirmer la modification",
        "Update from": "Remplacer",
        "to": "par",
        "Cell updated successfully": "Cellule mise à jour",
        "Failed to update cell": "Echec de la mise à jour de la cellule",
        "Bulk edit": "Modification groupée",
        "Column": "Colonne",
        "New value": "Nouvelle valeur",
        "Apply to selected rows": "Appliquer aux lignes sélectionnées",
        "rows selected": "ligne(s) sélectionnée(s)",
        "Bulk Update Complete": "Modification groupée terminée",
        "Updated": "Mis à jour",
        "failed": "en échec",
        "Absence Statistics": "Statistiques des absences",
        "Start Date": "Date de début",
        "End Date": "Date de fin",
        "Search Equipe": "Rechercher une équipe",
        "Total Absences": "Total des absences",
        "In Selected Range": "Dans la période",
        "Absence Types": "Types d'absence",
        "Absence Type": "Type d'absence",
        "Count": "Nombre",
        "Percentage": "Pourcentage",
        "No data available for the selected date range": "Aucune donnée pour la période sélectionnée",
        "Select Completion Date": "Sélectionner la date d'achèvement",
        "Notification sent for": "Notification envoyée pour",
        "Failed to send notification": "Echec de l'envoi de la notification",
        "Please select a date": "Veuillez sélectionner une date",
        "Success": "Succès",
        "Error": "Erreur",
        "Loading data...": "Chargement des données...",
        "Google Sheets Editor": "Editeur Google Sheets",
        "Google Apps Script URL": "URL du script Google Apps Script",
        "Google Apps Script URL is required": "L'URL du script Google Apps Script est obligatoire",
        "Please enter a valid Google Apps Script deployment URL": "Veuillez saisir une URL de déploiement Google Apps Script valide",
        "Deploy your Google Apps Script as a web app and paste the deployment URL here":
            "Déployez le script Google Apps Script en application web et collez ici l'URL de déploiement",
        "Language": "English",
        "Unknown": "Inconnu",
        "Row": "Ligne",
        "failed cell update(s)": "mise(s) à jour de cellule en échec",
        "Edit column": "Modifier la colonne",
        "selected row(s) hidden by filters": "ligne(s) sélectionnée(s) masquée(s) par les filtres",
        "Select shown": "Cocher les dates affichées",
        "Search Motif": "Rechercher un motif",
    },
}

# Renvoie la traduction d'une clé, la clé elle-même si elle est absente de la table
def t(cle: str, langue: str) -> str:
    return TRADUCTIONS.get(langue, {}).get(cle, cle)

# Renvoie une langue supportée à partir d'une valeur persistée quelconque
def langue_valide(val, defaut=LANGUE_DEFAUT) -> str:
    if isinstance(val, str) and val.strip().lower() in LANGUES:
        return val.strip().lower()
    return defaut

def basculer_langue(langue: str) -> str:
    return "en" if langue_valide(langue) == "fr" else "fr"

def nom_mois(mois: int, annee: int, langue: str) -> str:
    return f"{NOMS_MOIS[langue_valide(langue)][mois - 1]} {annee}"
