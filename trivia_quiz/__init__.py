"""Trivia quiz with CSV question banks and a Streamlit front end."""
