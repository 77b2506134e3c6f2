"""
The MODEL layer contains the garden data structures and editing logic.
It has NO knowledge of the Visualization (PyVista). The only Qt it touches
is QSettings, as the persistent store behind GardenStorage.
"""
