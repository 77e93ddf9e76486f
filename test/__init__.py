from __future__ import annotations

# Values shared by the unit tests
EXAMPLE_ACCESS_KEY_ID = "AKIDEXAMPLE"
EXAMPLE_SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
EXAMPLE_SESSION_TOKEN = "IQoJb3JpZ2luX2VjEPr//////////wEaCXVzLWFz"
