"""
Duty roster calendar: import camp duty rosters, resolve who does what
during each agenda block, and find related schedule entries.
"""
