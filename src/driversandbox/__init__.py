"""

Driver Sandbox

A local stand-in for the host platform that custom drivers run in. Drivers poll a device over HTTP,
SSH, Telnet, WinRM or SNMP and report structured results through the platform object `D`. The
sandbox reproduces the parts of that object whose behaviour drivers depend on, so a driver can be
written and exercised on a workstation.

- sandbox.Sandbox: the `D` object. Builds results, reports success or failure.
- results: validated payloads - configuration backups, variables and tables. Validation
  raises as soon as a payload breaks one of the host's limits.
- protocol.tasks: combinators for driver tasks. execute_all() starts every task at once and
  collects the results in task order; execute_seq() chains tasks, handing each the previous result.
  all_of() and seq_of() do the same but return a future that fails on the first error.
- support.clone: per-call copies of a shared transport configuration.
- winrm.codecs: little-endian 64-bit encoding used when building WinRM frames.
- config: layered configuration files for the host limits.


## Threading

Drivers are written for a single threaded, callback driven host. Nothing here starts a thread.
Tasks are free to call back from another thread (e.g. a ThreadPoolExecutor standing in for a
transport) and the combinators guard their bookkeeping for that case, but there is no cancellation
of running tasks and no timeout other than waiting on a future.

"""
