##################
# application UI #
##################

import json

import streamlit as st
import pandas as pd
import plotly.express as px
from st_aggrid import AgGrid, DataReturnMode, GridOptionsBuilder, JsCode, GridUpdateMode
from streamlit_javascript import st_javascript

from app_const import *
from app_utils import formater_cellule, formater_cellule_typee, get_cellule_modifiee, safe_int
from app_colonnes import resoudre_roles
from app_config import valider_url_script
from app_erreurs import AbsencesError, ValidationError
from app_filtres import (
    EtatFiltres, avec_nom, avec_dates, avec_equipe, avec_motif, basculer_date, basculer_mois, effacer_filtres,
    calculer_visibles, valeurs_distinctes, grouper_dates_par_mois, rechercher_dates, mois_partiellement_coche,
    filtrer_options,
)
from app_metier import (
    EtatGrille, entrer_edition, saisir_edition, demander_validation, annuler_edition, confirmer_edition,
    basculer_selection, selectionner_visibles, vider_selection, fusionner_selection_grille,
    elaguer,
    ouvrir_bulk, saisir_bulk, annuler_bulk, appliquer_bulk,
)
from app_stats import FiltresStats, calculer_statistiques, equipes_connues
from gsheet_api import GatewaySheet
from telegram_api import notifier_completion
from traductions import t, langue_valide, basculer_langue
import tracer

###########
# JsCodes #
###########

# Resélectionne au premier affichage les lignes marquées __sel (sélection conservée côté Python)
JS_RESELECTIONNER = JsCode("""
function(params) {
    params.api.sizeColumnsToFit();
    params.api.forEachNode(function(node) {
        if (node.data && node.data.__sel) { node.setSelected(true); }
    });
}
""")

# Met en évidence les cellules dont l'écriture a échoué.
# __erreurs contient un objet JSON { champ: message } pour la ligne.
JS_STYLE_ERREUR = JsCode("""
function(params) {
    var erreurs = (params.data && params.data.__erreurs) ? JSON.parse(params.data.__erreurs) : {};
    if (params.colDef.field in erreurs) {
        return { 'backgroundColor': '#fdecea', 'color': '#b71c1c' };
    }
    return null;
}
""")

# Infobulle donnant la raison de l'échec sur la cellule concernée
JS_INFOBULLE_ERREUR = JsCode("""
function(params) {
    var erreurs = (params.data && params.data.__erreurs) ? JSON.parse(params.data.__erreurs) : {};
    return erreurs[params.colDef.field] || null;
}
""")

##########
# Langue #
##########

# Langue courante : localStorage du navigateur (clé "language"), défaut fr
def get_langue():
    if "langue" in st.session_state:
        return st.session_state.langue
    valeur = st_javascript(f"localStorage.getItem('{CLE_LANGUE}')", key="langue_locale")
    if valeur == 0:
        # Composant pas encore évalué côté navigateur
        return LANGUE_DEFAUT
    st.session_state.langue = langue_valide(valeur)
    tracer.log(f"Langue {st.session_state.langue}", types=["main"])
    return st.session_state.langue

def changer_langue():
    langue = basculer_langue(get_langue())
    st.session_state.langue = langue
    st.session_state.langue_a_persister = langue

def persister_langue():
    langue = st.session_state.pop("langue_a_persister", None)
    if langue is not None:
        st_javascript(f"localStorage.setItem('{CLE_LANGUE}', '{langue}')", key=f"langue_persist_{langue}")

############
# Messages #
############

def signaler(genre, texte):
    st.session_state.message = (genre, texte)

# Affiche le message laissé par le rerun précédent
def afficher_message():
    message = st.session_state.pop("message", None)
    if message is None:
        return
    genre, texte = message
    if genre == "success":
        st.toast(texte, icon="✅")
    elif genre == "warning":
        st.warning(texte)
    else:
        st.error(texte)

def forcer_reaffichage_grille():
    st.session_state.setdefault("grille_key_counter", 0)
    st.session_state.grille_key_counter += 1

#########
# Titre #
#########

def afficher_titre(langue):
    st.markdown(
        """
        <style>
            .block-container {
                padding-top: 2rem;
            }
        </style>
        """,
        unsafe_allow_html=True
    )
    st.markdown(f"## {t('ABSENCES', langue)}")

#################
# Configuration #
#################

# Ecran de saisie de l'URL de déploiement du script quand aucune URL n'est configurée
def afficher_ecran_configuration(langue):
    st.markdown(f"### {t('Google Sheets Editor', langue)}")
    st.caption(t("Deploy your Google Apps Script as a web app and paste the deployment URL here", langue))
    url = st.text_input(t("Google Apps Script URL", langue), placeholder="https://script.google.com/macros/s/.../exec")
    if st.button(t("Connect & Load Data", langue), type="primary"):
        try:
            st.session_state.url_script = valider_url_script(url)
        except ValidationError as e:
            st.error(t(e.message, langue))
            return
        st.session_state.pop("force_configuration", None)
        st.session_state.pop("gateway", None)
        st.rerun()

##############
# Chargement #
##############

def get_gateway(config):
    url = st.session_state.get("url_script") or config.url_script
    gateway = st.session_state.get("gateway")
    if gateway is None or gateway.url != url:
        audit = config.colonnes.audit
        gateway = GatewaySheet(url, timeout=config.timeout, audit=audit)
        st.session_state.gateway = gateway
        st.session_state.pop("roles", None)
        st.session_state.pop("erreur_chargement", None)
    return gateway

# Charge la feuille et résout les rôles de colonnes. Les filtres, la sélection et les
# sessions d'édition sont conservés ; un rechargement en échec remplace la vue par l'erreur.
def charger_donnees(gateway, config, langue):
    with st.spinner(t("Loading data...", langue)):
        try:
            dataset = gateway.charger()
            st.session_state.roles = resoudre_roles(dataset.entetes, config.colonnes)
            set_grille(elaguer(get_grille(), dataset))
            st.session_state.erreur_chargement = None
        except AbsencesError as e:
            st.session_state.roles = None
            st.session_state.erreur_chargement = str(e)
    forcer_reaffichage_grille()

def afficher_erreur_chargement(gateway, config, langue):
    st.error(st.session_state.get("erreur_chargement") or t("Error", langue))
    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button(t("Refresh", langue), use_container_width=CENTRER_BOUTONS):
            charger_donnees(gateway, config, langue)
            st.rerun()
    with col2:
        if st.button(t("Google Apps Script URL", langue), use_container_width=CENTRER_BOUTONS):
            st.session_state.pop("url_script", None)
            st.session_state.pop("gateway", None)
            st.session_state.force_configuration = True
            st.rerun()

###########
# Filtres #
###########

def get_filtres() -> EtatFiltres:
    st.session_state.setdefault("filtres", EtatFiltres())
    return st.session_state.filtres

def set_filtres(filtres: EtatFiltres):
    st.session_state.filtres = filtres
    forcer_reaffichage_grille()

# Options d'une liste déroulante de filtre : "tous" puis les valeurs correspondant à la recherche.
# La valeur actuellement filtrée reste proposée même si elle ne correspond pas à la recherche.
def options_filtre(valeurs, recherche, courant, libelle_tous):
    options = filtrer_options(valeurs, recherche)
    if courant is not None and courant not in options:
        options = [courant] + options
    return [libelle_tous] + options

def afficher_filtres(dataset, roles, config, langue):

    def on_nom_change():
        set_filtres(avec_nom(get_filtres(), st.session_state[f"filtre_nom_{version}"]))

    def on_date_change(d):
        set_filtres(basculer_date(get_filtres(), d))

    def on_mois_click(dates):
        set_filtres(basculer_mois(get_filtres(), dates))
        st.session_state.filtres_key_counter += 1

    def on_equipe_change():
        choix = st.session_state[f"filtre_equipe_{version}"]
        set_filtres(avec_equipe(get_filtres(), None if choix == tous_equipes else choix))

    def on_motif_change():
        choix = st.session_state[f"filtre_motif_{version}"]
        set_filtres(avec_motif(get_filtres(), None if choix == tous_motifs else choix))

    def on_dates_affichees(dates_affichees):
        set_filtres(avec_dates(get_filtres(), get_filtres().dates | set(dates_affichees)))
        st.session_state.filtres_key_counter += 1

    def on_effacer_dates():
        set_filtres(avec_dates(get_filtres(), ()))
        st.session_state.filtres_key_counter += 1

    def on_effacer():
        set_filtres(effacer_filtres())
        st.session_state.filtres_key_counter += 1

    st.session_state.setdefault("filtres_key_counter", 0)
    version = st.session_state.filtres_key_counter
    filtres = get_filtres()

    st.sidebar.title(t("Filters", langue))

    st.sidebar.text_input(t("Search Name", langue), value=filtres.nom, key=f"filtre_nom_{version}", on_change=on_nom_change)

    # Dates regroupées par mois
    dates = valeurs_distinctes(dataset, roles, "date", config.valeur_porte)
    libelle = t("All dates", langue) if not filtres.dates else f"{len(filtres.dates)} {t('dates selected', langue)}"
    with st.sidebar.expander(libelle):
        recherche = st.text_input(t("Search dates", langue), key=f"filtre_dates_recherche_{version}")
        groupes = rechercher_dates(grouper_dates_par_mois(dates, langue), recherche)
        if not groupes:
            st.caption(t("No dates found", langue))
        col1, col2 = st.columns([1, 1])
        with col1:
            affichees = [d for g in groupes for d in g.dates]
            st.button(t("Select shown", langue), key=f"dates_affichees_{version}", on_click=on_dates_affichees,
                      args=(affichees,), disabled=not affichees, use_container_width=True)
        with col2:
            st.button(t("Clear", langue), key=f"dates_effacer_{version}", on_click=on_effacer_dates,
                      disabled=not filtres.dates, use_container_width=True)
        for g in groupes:
            marque = " ◐" if mois_partiellement_coche(filtres, g.dates) else ""
            st.button(f"{g.libelle}{marque}", key=f"mois_{g.annee}_{g.mois}_{version}", on_click=on_mois_click, args=(g.dates,))
            for d in g.dates:
                st.checkbox(
                    formater_cellule(d),
                    value=d in filtres.dates,
                    key=f"date_{d}_{version}",
                    on_change=on_date_change,
                    args=(d,),
                )

    tous_equipes = t("All equipes", langue)
    recherche_equipe = st.sidebar.text_input(t("Search Equipe", langue), key=f"filtre_equipe_recherche_{version}")
    equipes = options_filtre(valeurs_distinctes(dataset, roles, "equipe", config.valeur_porte), recherche_equipe,
                             filtres.equipe, tous_equipes)
    st.sidebar.selectbox(
        "Equipe",
        equipes,
        index=equipes.index(filtres.equipe) if filtres.equipe in equipes else 0,
        key=f"filtre_equipe_{version}",
        on_change=on_equipe_change,
    )

    tous_motifs = t("All motifs", langue)
    recherche_motif = st.sidebar.text_input(t("Search Motif", langue), key=f"filtre_motif_recherche_{version}")
    motifs = options_filtre(valeurs_distinctes(dataset, roles, "motif", config.valeur_porte), recherche_motif,
                            filtres.motif, tous_motifs)
    st.sidebar.selectbox(
        "Motif",
        motifs,
        index=motifs.index(filtres.motif) if filtres.motif in motifs else 0,
        key=f"filtre_motif_{version}",
        on_change=on_motif_change,
    )

    st.sidebar.button(t("Clear Filters", langue), on_click=on_effacer, disabled=filtres.est_vide, use_container_width=True)

##########
# Grille #
##########

def get_grille() -> EtatGrille:
    st.session_state.setdefault("grille", EtatGrille())
    return st.session_state.grille

def set_grille(etat: EtatGrille):
    st.session_state.grille = etat

def champ(col):
    return f"c{col}"

# Construit le DataFrame affiché : une ligne par ligne visible, valeurs formatées,
# colonnes de travail __index (index d'origine), __sel et __erreurs
def creer_df_display(dataset, roles, visibles, etat: EtatGrille):
    erreurs_par_ligne = etat.erreurs_par_ligne()
    data = []
    for v in visibles:
        row = {champ(c): formater_cellule_typee(dataset.cellule(v.index_origine, c)) for c in range(roles.nb_colonnes)}
        row["__index"] = v.index_origine
        row["__sel"] = v.index_origine in etat.selection
        erreurs = erreurs_par_ligne.get(v.index_origine)
        row["__erreurs"] = json.dumps({champ(c): m for c, m in erreurs.items()}, ensure_ascii=False) if erreurs else ""
        data.append(row)
    colonnes = [champ(c) for c in range(roles.nb_colonnes)] + ["__index", "__sel", "__erreurs"]
    return pd.DataFrame(data, columns=colonnes)

def afficher_grille(dataset, roles, visibles, langue, key="grille"):

    etat = get_grille()
    df = creer_df_display(dataset, roles, visibles, etat)

    # Calcul de la hauteur de l'aggrid
    height = min(len(df) * LIGNE_PX + 50, HAUTEUR_MAX_GRILLE)

    # Initialisation du compteur qui permet de forcer le réaffichage complet de l'aggrid
    st.session_state.setdefault("grille_key_counter", 0)

    gb = GridOptionsBuilder.from_dataframe(df)
    gb.configure_default_column(resizable=True, cellStyle=JS_STYLE_ERREUR, tooltipValueGetter=JS_INFOBULLE_ERREUR)

    for c in range(roles.nb_colonnes):
        gb.configure_column(
            champ(c),
            headerName=str(dataset.entetes[c]) if c < len(dataset.entetes) else "",
            editable=roles.est_editable(c),
            hide=roles.est_audit(c),
        )
    if roles.site is not None:
        gb.configure_column(champ(roles.site), pinned=JsCode("'left'"), checkboxSelection=True, headerCheckboxSelection=False)

    # Colonnes de travail
    for col in ["__index", "__sel", "__erreurs"]:
        gb.configure_column(col, hide=True)

    gb.configure_selection(selection_mode="multiple", use_checkbox=False, suppressRowClickSelection=True)
    gb.configure_grid_options(
        onFirstDataRendered=JS_RESELECTIONNER,
        getRowId=JsCode("function (params) { return String(params.data.__index); }"),
        stopEditingWhenCellsLoseFocus=True,
        tooltipShowDelay=0,
    )

    grid_options = gb.build()
    grid_options["suppressMovableColumns"] = True

    grid_key = f"_{key} {st.session_state.grille_key_counter}"
    tracer.log(f"Grid_key: {grid_key}", types=["event"])

    response = AgGrid(
        df,
        gridOptions=grid_options,
        allow_unsafe_jscode=True,
        height=height,
        data_return_mode=DataReturnMode.AS_INPUT,
        update_mode=GridUpdateMode.VALUE_CHANGED | GridUpdateMode.SELECTION_CHANGED,
        key=grid_key,
    )

    event_data = response.get("event_data")
    event_type = event_data["type"] if isinstance(event_data, dict) else None
    tracer.log(f"{key}: event {event_type}", types=["event"])

    # Sélection par cases à cocher : seules les lignes visibles sont concernées
    if event_type == "selectionChanged":
        selected_rows = response["selected_rows"]
        if isinstance(selected_rows, pd.DataFrame):
            coches = [safe_int(i) for i in selected_rows["__index"]] if not selected_rows.empty else []
        elif isinstance(selected_rows, list):
            coches = [safe_int(r.get("__index")) for r in selected_rows]
        else:
            coches = []
        set_grille(fusionner_selection_grille(get_grille(), [v.index_origine for v in visibles], coches))

    # Modification de cellule : ouverture de la session d'édition puis demande de confirmation
    elif event_type == "cellValueChanged":
        try:
            df_dom = pd.DataFrame(response["data"]) if isinstance(response.get("data"), pd.DataFrame) else pd.DataFrame()
        except (KeyError, ValueError):
            df_dom = pd.DataFrame()
        modif = get_cellule_modifiee(df, df_dom, [champ(c) for c in roles.colonnes_editables()])
        forcer_reaffichage_grille()
        if modif is not None:
            ligne, nom_champ, valeur = modif
            col = int(nom_champ[1:])
            etat = entrer_edition(get_grille(), dataset, roles, ligne, col)
            etat = saisir_edition(etat, valeur)
            set_grille(demander_validation(etat))

# Libellé d'une ligne d'origine : numéro, nom et date
def libelle_ligne(dataset, roles, ligne, langue):
    morceaux = [f"{t('Row', langue)} {ligne + 1}"]
    for col in (roles.nom, roles.date):
        texte = formater_cellule_typee(dataset.cellule(ligne, col))
        if texte:
            morceaux.append(texte)
    return " · ".join(morceaux)

# Raisons des écritures en échec, cellule par cellule (lignes masquées comprises)
def lister_erreurs_cellules(dataset, roles, etat: EtatGrille, langue):
    lignes = []
    for ligne, erreurs in etat.erreurs_par_ligne().items():
        if not dataset.contient(ligne):
            continue
        for col, message in erreurs.items():
            entete = dataset.entetes[col] if 0 <= col < len(dataset.entetes) else col
            lignes.append(f"{libelle_ligne(dataset, roles, ligne, langue)} · {entete} : {message}")
    return lignes

def afficher_erreurs_cellules(dataset, roles, langue):
    lignes = lister_erreurs_cellules(dataset, roles, get_grille(), langue)
    if not lignes:
        return
    with st.expander(f"{len(lignes)} {t('failed cell update(s)', langue)}", expanded=True):
        for texte in lignes:
            st.caption(texte)

# DialogBox de confirmation de modification de cellule (titre traduit à l'ouverture)
def show_dialog_confirmer_modification(gateway, langue):
    st.dialog(t("Confirm Change", langue))(_dialog_confirmer_modification)(gateway, langue)

def _dialog_confirmer_modification(gateway, langue):
    session = get_grille().edition
    avant = formater_cellule(session.valeur_initiale, vide="-")
    apres = formater_cellule(session.saisie, vide="-")
    st.markdown(f"{t('Update from', langue)} **{avant}** {t('to', langue)} **{apres}**")
    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button(t(LABEL_BOUTON_VALIDER, langue), use_container_width=CENTRER_BOUTONS):
            etat, resultat = confirmer_edition(get_grille(), gateway)
            set_grille(etat)
            if resultat is not None and resultat.succes:
                signaler("success", t("Cell updated successfully", langue))
            elif resultat is not None:
                signaler("error", f"{t('Failed to update cell', langue)} : {resultat.erreur.message}")
            forcer_reaffichage_grille()
            st.rerun()
    with col2:
        if st.button(t(LABEL_BOUTON_ANNULER, langue), use_container_width=CENTRER_BOUTONS):
            set_grille(annuler_edition(get_grille()))
            forcer_reaffichage_grille()
            st.rerun()

########################
# Modification groupée #
########################

def afficher_controles_selection(dataset, roles, visibles, gateway, langue):
    etat = get_grille()
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        st.caption(f"{len(etat.selection)} {t('rows selected', langue)}")
    with col2:
        if st.button(t("Select All", langue), use_container_width=True, disabled=not visibles):
            set_grille(selectionner_visibles(etat, visibles))
            forcer_reaffichage_grille()
            st.rerun()
    with col3:
        if st.button(t("Clear", langue), use_container_width=True, disabled=not etat.selection):
            set_grille(vider_selection(etat))
            forcer_reaffichage_grille()
            st.rerun()

    if not etat.selection:
        return

    afficher_selection_masquee(dataset, roles, visibles, langue)

    with st.expander(t("Bulk edit", langue), expanded=etat.bulk is not None):
        editables = roles.colonnes_editables()
        if not editables:
            return

        # Choix de la colonne cible : ouvre la session de modification groupée
        if etat.bulk is None:
            col = st.selectbox(
                t("Column", langue),
                editables,
                format_func=lambda c: str(dataset.entetes[c]),
                key="bulk_colonne",
            )
            if st.button(t("Edit column", langue), disabled=etat.edition is not None):
                set_grille(ouvrir_bulk(etat, roles, col))
                st.rerun()
            return

        # Saisie de la valeur puis application ou abandon
        st.markdown(f"**{dataset.entetes[etat.bulk.col]}** : {len(etat.selection)} {t('rows selected', langue)}")
        valeur = st.text_input(t("New value", langue), key="bulk_valeur")
        col1, col2 = st.columns([1, 1])
        with col1:
            if st.button(t("Apply to selected rows", langue), type="primary", use_container_width=CENTRER_BOUTONS):
                etat = saisir_bulk(etat, valeur)
                with st.spinner(t("Loading data...", langue)):
                    etat, bilan = appliquer_bulk(etat, gateway)
                set_grille(etat)
                st.session_state.pop("bulk_valeur", None)
                texte = f"{t('Bulk Update Complete', langue)} : {t('Updated', langue)} {bilan.succes}"
                if bilan.echecs:
                    signaler("warning", f"{texte}, {bilan.echecs} {t('failed', langue)}")
                else:
                    signaler("success", texte)
                forcer_reaffichage_grille()
                st.rerun()
        with col2:
            if st.button(t(LABEL_BOUTON_ANNULER, langue), use_container_width=CENTRER_BOUTONS):
                set_grille(annuler_bulk(etat))
                st.session_state.pop("bulk_valeur", None)
                st.rerun()

# Lignes sélectionnées masquées par les filtres : restent sélectionnées, décochables une à une
def afficher_selection_masquee(dataset, roles, visibles, langue):

    def on_decocher(ligne):
        set_grille(basculer_selection(get_grille(), ligne))
        forcer_reaffichage_grille()

    etat = get_grille()
    masquees = sorted(etat.selection - {v.index_origine for v in visibles})
    if not masquees:
        return
    version = st.session_state.get("grille_key_counter", 0)
    with st.expander(f"{len(masquees)} {t('selected row(s) hidden by filters', langue)}"):
        for ligne in masquees:
            st.checkbox(
                libelle_ligne(dataset, roles, ligne, langue),
                value=True,
                key=f"masquee_{ligne}_{version}",
                on_change=on_decocher,
                args=(ligne,),
            )

################
# Statistiques #
################

CLES_FILTRES_STATS = ("stats_debut", "stats_fin", "stats_equipe")

# "Tout effacer" : filtres appliqués et champs de saisie remis à vide
def effacer_filtres_stats():
    st.session_state.filtres_stats = FiltresStats()
    for cle in CLES_FILTRES_STATS:
        st.session_state.pop(cle, None)

# Répartition des absences par motif en camembert
def creer_camembert(df):
    return px.pie(df, values="Nombre", names="Motif", title=None)

# DialogBox des statistiques (titre traduit à l'ouverture)
def show_dialog_statistiques(dataset, roles, langue):
    st.dialog(t("Absence Statistics", langue), width="large")(_dialog_statistiques)(dataset, roles, langue)

def _dialog_statistiques(dataset, roles, langue):
    st.session_state.setdefault("filtres_stats", FiltresStats())

    col1, col2 = st.columns([1, 1])
    with col1:
        debut = st.date_input(t("Start Date", langue), value=None, key="stats_debut", format="DD/MM/YYYY")
    with col2:
        fin = st.date_input(t("End Date", langue), value=None, key="stats_fin", format="DD/MM/YYYY")
    equipes = equipes_connues(dataset, roles)
    equipe = st.text_input(t("Search Equipe", langue), key="stats_equipe", placeholder=", ".join(equipes[:5]))

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button(t("Apply Filters", langue), use_container_width=CENTRER_BOUTONS):
            st.session_state.filtres_stats = FiltresStats(
                debut.isoformat() if debut else None,
                fin.isoformat() if fin else None,
                equipe,
            )
    with col2:
        st.button(t("Clear All", langue), on_click=effacer_filtres_stats, use_container_width=CENTRER_BOUTONS)

    stats = calculer_statistiques(dataset, roles, st.session_state.filtres_stats, get_filtres().dates)

    col1, col2 = st.columns([1, 1])
    col1.metric(t("Total Absences", langue), stats.total)
    col2.metric(t("In Selected Range", langue), stats.filtre)

    if not stats.par_motif:
        st.info(t("No data available for the selected date range", langue))
        return

    df = stats.en_dataframe()
    df["Motif"] = df["Motif"].replace({MOTIF_INCONNU: t("Unknown", langue)})
    st.markdown(f"##### {t('Absence Types', langue)}")
    col1, col2 = st.columns([1, 1])
    with col1:
        st.bar_chart(df.set_index("Motif")["Nombre"])
    with col2:
        st.plotly_chart(creer_camembert(df), use_container_width=True, config={"displayModeBar": False})
    df.columns = [t("Absence Type", langue), t("Count", langue), t("Percentage", langue)]
    st.dataframe(df, hide_index=True, use_container_width=True)

##########################
# Notification Telegram  #
##########################

def afficher_bouton_completion(config, langue):
    with st.popover(t("Mark Complete", langue)):
        jour = st.date_input(t("Select Completion Date", langue), value=None, key="date_completion", format="DD/MM/YYYY")
        if st.button(t("Send to Telegram", langue), disabled=jour is None, use_container_width=True):
            if jour is None:
                signaler("error", t("Please select a date", langue))
                st.rerun()
            try:
                message = notifier_completion(config.url_relais, jour.isoformat(), langue, timeout=config.timeout)
                signaler("success", f"{t('Notification sent for', langue)} {jour.isoformat()}")
                tracer.log(message, types=["relais"])
            except AbsencesError as e:
                signaler("error", str(e) or t("Failed to send notification", langue))
            st.rerun()

##################
# Barre d'outils #
##################

def afficher_barre_outils(gateway, config, dataset, roles, langue):
    col1, col2, col3, col4 = st.columns([1, 1, 1, 1])
    with col1:
        if st.button(t("Refresh", langue), use_container_width=True):
            charger_donnees(gateway, config, langue)
            st.rerun()
    with col2:
        if st.button(t("Statistics", langue), use_container_width=True):
            show_dialog_statistiques(dataset, roles, langue)
    with col3:
        afficher_bouton_completion(config, langue)
    with col4:
        st.button(t("Language", langue), on_click=changer_langue, use_container_width=True)

########
# Page #
########

def afficher_page(config):
    langue = get_langue()
    persister_langue()
    afficher_titre(langue)
    afficher_message()

    url = st.session_state.get("url_script") or config.url_script
    if not url or st.session_state.get("force_configuration"):
        afficher_ecran_configuration(langue)
        return

    gateway = get_gateway(config)
    if gateway.dataset is None and "erreur_chargement" not in st.session_state:
        charger_donnees(gateway, config, langue)

    roles = st.session_state.get("roles")
    dataset = gateway.dataset
    if dataset is None or roles is None:
        afficher_erreur_chargement(gateway, config, langue)
        return

    st.caption(f"{config.nom_feuille} : {len(dataset)}")
    afficher_filtres(dataset, roles, config, langue)
    afficher_barre_outils(gateway, config, dataset, roles, langue)

    visibles = calculer_visibles(dataset, roles, get_filtres(), config.valeur_porte)
    afficher_controles_selection(dataset, roles, visibles, gateway, langue)
    afficher_grille(dataset, roles, visibles, langue)
    afficher_erreurs_cellules(dataset, roles, langue)

    if get_grille().mode == MODE_CONFIRMATION:
        show_dialog_confirmer_modification(gateway, langue)
