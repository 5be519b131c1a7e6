"""End-to-end tests for the ROSA CLI.

These tests run the installed `rosa` command against real accounts and require:
- ROSA_E2E=1 to opt in
- An OCM offline token in OCM_TOKEN (OCM_URL selects the environment)
- AWS credentials allowed to manage IAM OIDC providers, S3 and Secrets Manager

Tests are marked with @pytest.mark.integration and can be run with:
    ROSA_E2E=1 pytest tests/integration/ -m integration

To skip integration tests:
    pytest -m "not integration"
"""
