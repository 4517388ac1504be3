"""
OrderDesk Backend: Authentication Service
===========================================

What:  Registration and login.
Who:   POST /register and POST /login.

Login flow:
    1. Look the account up by username     → NotFoundError (404) if absent
    2. bcrypt-verify the submitted password → UnauthorizedError (403) on mismatch
    3. Issue a signed token for the username
    4. Return the account's public fields plus the token

Step 2 always returns early on a mismatch; a wrong password can never reach
token issuance.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.exceptions import UnauthorizedError
from orderdesk.schemas.account import AccountResponse, LoginResponse, RegisterRequest
from orderdesk.security import TokenService, token_service, verify_password
from orderdesk.services.account_service import AccountService, account_service

logger = logging.getLogger(__name__)


class AuthService:
    """
    Stateless; the account service and token service are injected so tests
    can sign with their own secret.
    """

    def __init__(self, accounts: AccountService, tokens: TokenService):
        self.accounts = accounts
        self.tokens = tokens

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> AccountResponse:
        """
        Create an account from a registration request.

        Raises:
            HashingError:     password longer than 72 bytes
            PersistenceError: username taken or insert failed
        """
        account = await self.accounts.create(db, payload)
        logger.info("Registered account %s (%s)", account.id, account.username)
        return account

    async def login(self, db: AsyncSession, username: str, password: str) -> LoginResponse:
        """
        Verify credentials and issue a token.

        Raises:
            NotFoundError:     no account with this username
            UnauthorizedError: password does not match
        """
        account = await self.accounts.get_by_username(db, username)

        if not verify_password(password, account.password):
            logger.warning("Failed login for username %s", username)
            raise UnauthorizedError(message="Not authenticated", reason="password mismatch")

        token = self.tokens.issue(account.username)
        logger.info("Account %s logged in", account.id)

        return LoginResponse(
            id=account.id,
            name=account.name,
            username=account.username,
            phone=account.phone,
            token=token,
        )


auth_service = AuthService(accounts=account_service, tokens=token_service)
