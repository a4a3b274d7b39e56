"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    └── pricing/     Pure pricing and GST logic

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit -m unit -v         # By marker
"""
import os
import sys

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
