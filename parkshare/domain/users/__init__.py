"""Users domain - identity records, role assignment and role guards"""
