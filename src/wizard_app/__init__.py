"""
Wizard App - web server and CLI for the onboarding wizard.

Wires the onboarding core to FastAPI routes, the record-store endpoint and
the data review listing.
"""

__version__ = "1.0.0"
