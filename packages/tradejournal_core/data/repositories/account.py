# packages/tradejournal_core/data/repositories/account.py
"""
账户仓储
所有查询都按 user_id 隔离
"""
from sqlmodel import select, Session
from sqlalchemy import delete
from typing import List, Optional

from tradejournal_core.data.models.account import Account, ActiveAccount
from tradejournal_core.data.models.trade import Trade
from tradejournal_core.errors import InvalidInputError, NotFoundError
from tradejournal_core.utils import get_logger, utc_now

logger = get_logger("account_repository")


class AccountRepository:
    """账户仓储"""
    
    def __init__(self, session: Session):
        self.session = session
    
    def create(
        self,
        user_id: str,
        name: str,
        currency: str = "USD",
        start_balance: float = 0.0,
    ) -> Account:
        """
        创建账户
        
        Args:
            user_id: 用户ID（来自认证服务）
            name: 账户名称
            currency: ISO 货币代码
            start_balance: 初始余额（不能为负）
        """
        if not name or not name.strip():
            raise InvalidInputError("Account name is required")
        if start_balance is None or start_balance < 0:
            raise InvalidInputError(f"Invalid start balance: {start_balance}")
        
        account = Account(
            user_id=user_id,
            name=name.strip(),
            currency=(currency or "USD").strip().upper(),
            start_balance=float(start_balance),
            created_at=utc_now(),
        )
        self.session.add(account)
        self.session.commit()
        self.session.refresh(account)
        logger.info(f"✅ Created account: {account.name} ({account.currency}) for user {user_id}")
        return account
    
    def get_by_id(self, account_id: int) -> Optional[Account]:
        """通过ID获取账户"""
        statement = select(Account).where(Account.id == account_id)
        return self.session.exec(statement).first()
    
    def get_for_user(self, user_id: str, account_id: int) -> Account:
        """获取属于该用户的账户，不存在时抛出 NotFoundError"""
        statement = (
            select(Account)
            .where(Account.id == account_id)
            .where(Account.user_id == user_id)
        )
        account = self.session.exec(statement).first()
        if not account:
            raise NotFoundError(f"Account with id {account_id} not found")
        return account
    
    def list_for_user(self, user_id: str) -> List[Account]:
        """获取用户的所有账户（按名称排序）"""
        statement = (
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.name, Account.id)
        )
        return list(self.session.exec(statement).all())
    
    def delete(self, user_id: str, account_id: int):
        """
        删除账户及其全部交易
        如果删除的是活跃账户，活跃账户切换到剩余的第一个账户
        """
        account = self.get_for_user(user_id, account_id)
        active = self.session.get(ActiveAccount, user_id)
        was_active = active is not None and active.account_id == account.id
        
        if was_active:
            self.session.delete(active)
        self.session.exec(delete(Trade).where(Trade.account_id == account.id))
        self.session.delete(account)
        self.session.commit()
        logger.info(f"🗑️ Deleted account {account_id} for user {user_id}")

        if was_active:
            remaining = self.list_for_user(user_id)
            if remaining:
                self._store_active(user_id, remaining[0].id)
    
    def get_active(self, user_id: str) -> Optional[Account]:
        """
        获取活跃账户
        未设置时回退到按名称排序的第一个账户，并记住这个选择
        """
        active = self.session.get(ActiveAccount, user_id)
        if active is not None:
            account = self.get_by_id(active.account_id)
            if account is not None and account.user_id == user_id:
                return account
        
        accounts = self.list_for_user(user_id)
        if not accounts:
            return None
        
        self._store_active(user_id, accounts[0].id)
        return accounts[0]
    
    def set_active(self, user_id: str, account_id: int) -> Account:
        """设置活跃账户"""
        account = self.get_for_user(user_id, account_id)
        self._store_active(user_id, account.id)
        logger.info(f"🎯 Active account for user {user_id}: {account.name}")
        return account
    
    def _store_active(self, user_id: str, account_id: int):
        active = self.session.get(ActiveAccount, user_id)
        if active is None:
            active = ActiveAccount(user_id=user_id, account_id=account_id)
        else:
            active.account_id = account_id
        active.updated_at = utc_now()
        self.session.add(active)
        self.session.commit()
