"""Cyclopts app for the settings command group."""

from cyclopts import App

app = App(name="settings", help="Inspect and edit the saved launcher settings")
