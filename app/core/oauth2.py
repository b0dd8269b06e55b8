from fastapi.security import OAuth2PasswordBearer

# Bearer token from the Authorization header; tokens come from the accounts service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=True)
