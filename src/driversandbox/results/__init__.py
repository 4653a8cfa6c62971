"""
Result payloads drivers hand to the host: configuration backups, variables and tables.
Each is validated when it is created, so an invalid payload fails in the driver rather than in the host.
"""
