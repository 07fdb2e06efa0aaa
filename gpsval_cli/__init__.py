"""
GPS Validator CLI - Command-line interface for survey validation.

Usage:
    gpsval validate data/survey.csv
    gpsval validate data/survey.csv --config config/validator_config.yaml --progress
    gpsval order 2 3 0 0 2 0 0 3
"""

__version__ = "1.0.0"
