"""
Business layer.

All rules that change data live here: authorization, validation, the
inventory ledger and the transfer workflow. Routes call into this layer and
never mutate models directly.
"""
