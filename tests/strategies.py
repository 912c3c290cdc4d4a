"""Hypothesis strategies for AIPA tasks, goals and fix input."""

from hypothesis import strategies as st

from aipa.models.task import Task

# Goals as a user might type them, including punctuation and unicode
goal_text = st.text(
    min_size=0,
    max_size=200,
    alphabet=st.characters(blacklist_categories=("Cs",)),
)

language_name = st.sampled_from(["rust", "python", "cpp", "c", "java", "javascript", "cobol"])

tasks = st.builds(Task, language=language_name, goal=goal_text)

# Source text that survives a UTF-8 round trip
source_text = st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=2000)

blank_line = st.sampled_from(["\n", "   \n", "\t\n", " \t \n"])
