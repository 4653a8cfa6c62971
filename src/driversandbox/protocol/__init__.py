"""
Task orchestration for driver scripts. Drivers issue several transport commands and combine the
results, either starting them all together or chaining them one after another.
"""
