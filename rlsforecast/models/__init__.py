"""Estimation modules.

recursive_ls          -- Sherman-Morrison expanding-window OLS for one design,
                         forecast-error extraction, direct OLS reference
recursive_forecaster  -- runs recursive_ls for every predictor and the
                         intercept-only benchmark, assembles ehat0/ehatj
"""
