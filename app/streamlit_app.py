"""Fretboard Arranger — Streamlit Tablature UI.

Minimal interactive application:
    1. Type or paste pitches (one beat per line)
    2. Pick tuning, frets, capo and how many arrangements to show
    3. View each arrangement's tab and a summary table
    4. Download the arrangements as JSON

Constraints:
    - No plotting libraries
    - No audio playback
    - Simple, readable code
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from fretboard_arranger.arrangement_engine.annotate import (
    compositions_to_json_bytes,
    create_compositions_from_text,
)
from fretboard_arranger.arrangement_engine.errors import ArrangementError
from fretboard_arranger.arrangement_engine.guitar import TUNINGS
from fretboard_arranger.config import ArrangerConfig

_EXAMPLE = "E4\nEb4\nE4\nEb4\nE4\nB3\nD4\nC4\n-\nA2A3\nE3\nA3\n"

# ── Page config ───────────────────────────────────────────────
st.set_page_config(
    page_title="Fretboard Arranger",
    page_icon="🎸",
    layout="wide",
)

st.title("🎸 Fretboard Arranger")
st.markdown(
    "Enter one beat per line (chords as `A2A3`, empty line = rest, `-` = measure "
    "break), then rank the most playable fingerings."
)
st.divider()

# ── Inputs ────────────────────────────────────────────────────
pitches_text: str = st.text_area("Pitches", value=_EXAMPLE, height=240)

c1, c2, c3, c4 = st.columns(4)
tuning_name: str = c1.selectbox("Tuning", list(TUNINGS), index=0)
num_frets: int = c2.number_input("Frets", min_value=0, max_value=30, value=18)
capo: int = c3.number_input("Capo", min_value=0, max_value=30, value=0)
num_arrangements: int = c4.number_input("Arrangements", min_value=1, max_value=20, value=3)

c5, c6 = st.columns(2)
width: int = c5.slider("Tab width", min_value=20, max_value=200, value=80)
open_string_cost: int = c6.number_input("Open string cost", min_value=0, value=0)

run_clicked: bool = st.button("▶  Arrange", type="primary")

if run_clicked:
    try:
        config = ArrangerConfig(
            tuning_name=tuning_name,
            num_frets=int(num_frets),
            capo=int(capo),
            num_arrangements=int(num_arrangements),
            width=width,
            open_string_cost=int(open_string_cost),
        )
        with st.spinner("Searching fingerings …"):
            compositions = create_compositions_from_text(pitches_text, config)
    except (ArrangementError, ValueError) as exc:
        st.error(str(exc))
        st.stop()

    if not compositions:
        st.warning("No playable arrangement found.")
        st.stop()

    # ── Summary ───────────────────────────────────────────────
    st.subheader("Summary")
    df = pd.DataFrame(
        [
            {"Rank": i, "Score": c.cost, "Max fret span": c.max_fret_span}
            for i, c in enumerate(compositions, start=1)
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)

    # ── Tabs ──────────────────────────────────────────────────
    for i, composition in enumerate(compositions, start=1):
        st.subheader(f"Arrangement {i} — score {composition.cost}")
        st.code(composition.tab or "(nothing to play)", language=None)

    # ── Download ──────────────────────────────────────────────
    st.download_button(
        label="⬇  Download arrangements.json",
        data=compositions_to_json_bytes(compositions),
        file_name="arrangements.json",
        mime="application/json",
    )
