"""
Wire level support for the WinRM transport. Only the binary encoding routines the transport relies
on live here; the transport itself is provided by the host.
"""
