"""Built-in perturbation scenarios for the bundled pathways.

Each entry lists single-node perturbations worth comparing on that pathway.
"""

# Mapping of pathway name to perturbation scenarios.
SCENARIOS = {
    "sachs": [
        # PKA is the hub of the consensus network (7 incident edges).
        {"type": "knockout", "node": "PKA"},
        # PKC feeds both the MAPK arm and PKA itself.
        {"type": "knockout", "node": "PKC"},
        # Raf sits at the top of the Raf-Mek-Erk cascade.
        {"type": "overexpression", "node": "Raf"},
    ],
    "mapk": [
        # Removing Ras disconnects the receptor from the kinase cascade.
        {"type": "knockout", "node": "Ras"},
        # ERK closes the negative feedback loop onto SOS.
        {"type": "overexpression", "node": "Erk", "multiplier": 3},
    ],
}
