"""
Report assembly and Excel output.
"""
