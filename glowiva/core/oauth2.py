from fastapi.security import OAuth2PasswordBearer

# Extracts the bearer token from the Authorization header.
# auto_error is off so a missing token is reported as an AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
