########
# Main #
########

import streamlit as st

from app_config import charger_config
from app_erreurs import ValidationError
from app_ui import afficher_page
from telegram_api import demarrer_relais
import tracer

# Trace le début d'un rerun
def rerun_trace():
    st.session_state.setdefault("main_counter", 0)
    st.session_state.main_counter += 1
    tracer.log(f"____________MAIN {st.session_state.main_counter}______________", types=["main"])

# Lecture de la configuration : section [absences] des secrets puis variables ABSENCES_*
def get_config():
    if "config" not in st.session_state:
        try:
            secrets = st.secrets.to_dict() if len(st.secrets) else None
        except FileNotFoundError:
            secrets = None
        st.session_state.config = charger_config(secrets)
    return st.session_state.config

# Opérations à ne faire qu'une seule fois au boot de l'appli
@st.cache_resource
def app_boot(_config):
    return demarrer_relais(_config)

def main():

    st.set_page_config(page_title="Absences", layout="wide")

    # Trace le début d'un rerun
    rerun_trace()

    try:
        config = get_config()
    except ValidationError as e:
        st.error(f"{e.champ} : {e.message}")
        st.stop()

    # Démarrage du relais de notification Telegram
    app_boot(config)

    afficher_page(config)

if __name__ == "__main__":
    main()
