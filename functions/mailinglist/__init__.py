"""Double opt-in mailing list handlers for API Gateway + DynamoDB + SES."""
