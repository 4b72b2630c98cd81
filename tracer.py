###############
# Debug trace #
###############

import logging
import inspect

TRACER_MODE = True
TRACE_TYPES = [
    "main",
    # "event",
    # "filtres",
    # "selection",
    "gs",
    "edition",
    "bulk",
    "stats",
    "relais",
    ]  # "all" ou liste des types de trace / noms de fonctions à afficher

_LOGGERS = {}

def get_logger(nom):
    if nom not in _LOGGERS:
        # Crée un logger
        logger = logging.getLogger(nom)
        logger.setLevel(logging.DEBUG)

        if logger.hasHandlers():
            logger.handlers.clear()

        # Ajoute le handler
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        _LOGGERS[nom] = logger

    return _LOGGERS[nom]

def log(trace="", types=["all"]):
    def get_caller_name():
        return inspect.stack()[2].function
    logger = get_logger("_app")
    caller_name = get_caller_name()
    types_requested = [s.lower() for s in TRACE_TYPES]
    types = [s.lower() for s in types]
    types.append(caller_name)
    if TRACER_MODE and ("all" in types_requested or any(x in types_requested for x in types)):
        logger.debug(f"{caller_name}: {trace}")

# Trace une erreur quel que soit le filtrage par types
def erreur(trace=""):
    logger = get_logger("_app")
    logger.error(f"{inspect.stack()[1].function}: {trace}")
