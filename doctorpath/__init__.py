"""
DoctorPath AI

Patient/doctor oncology portal: risk scoring, connection requests,
medical files, cases and AI-assisted treatment planning.
"""
__version__ = "1.0.0"
