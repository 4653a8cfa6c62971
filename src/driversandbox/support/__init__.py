"""
Small building blocks shared across the sandbox: value object mixins, the configuration cloner
and the event source used to publish driver results.
"""
