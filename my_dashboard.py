"""Entry point for the Pomodoro dashboard.

Run with:

    streamlit run my_dashboard.py
"""
from pomodoro.streamlit_app import main

main()
