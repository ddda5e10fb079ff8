"""
Integration tests for the Heart Matrix save-response function.

These tests drive complete request flows through lambda_handler with
mocked email providers (recording Resend transport, moto SES).
"""
