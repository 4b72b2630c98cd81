############################
# Erreurs de l'application #
############################

class AbsencesError(Exception):
    """Erreur de base de l'application."""

# Le script Apps Script est injoignable (réseau, DNS, timeout...)
class ConnectivityError(AbsencesError):
    pass

# Le script a répondu mais signale un échec (success: false ou statut HTTP en erreur)
class BackendError(AbsencesError):
    pass

# Le script signale un succès mais les lignes ne correspondent à aucune forme connue
class MalformedDataError(AbsencesError):
    pass

# Saisie de configuration invalide, rattachée à un champ
class ValidationError(AbsencesError):
    def __init__(self, champ, message):
        super().__init__(message)
        self.champ = champ
        self.message = message

# Un rôle de colonne requis n'a pas pu être résolu à partir des entêtes
class ConfigurationError(ValidationError):
    pass

# Echec d'écriture d'une cellule, limité à cette cellule
class CellUpdateError(AbsencesError):
    def __init__(self, ligne, col, message):
        super().__init__(message)
        self.ligne = ligne
        self.col = col
        self.message = message
