"""
creatorpay: creator onboarding, VAT-aware payment requests and payouts.
"""
__version__ = "0.1.0"
