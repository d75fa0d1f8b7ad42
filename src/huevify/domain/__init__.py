"""Release hub domain: lifecycle engine, catalog merge and play accrual."""
