"""
Initializes the 'src' directory as a Python package.

This lets 'main.py' in the project root import the application as
'src.capcap' without installing it. Installed, the package is imported as
'capcap'.
"""
