"""Default chart of accounts for a trading business."""

import logging

from tradebooks.domain.account import AccountService
from tradebooks.domain.entities import AccountType

logger = logging.getLogger(__name__)

A, L, E, I, X = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
    AccountType.INCOME,
    AccountType.EXPENSE,
)

# (code, name, type, description, parent code), parents before children
DEFAULT_ACCOUNTS = [
    ("1000", "Assets", A, "Main asset category", None),
    ("1100", "Current Assets", A, "Assets expected to be converted to cash within one year", "1000"),
    ("1110", "Cash and Cash Equivalents", A, "Liquid cash assets", "1100"),
    ("1111", "Petty Cash", A, "Small cash fund for minor expenses", "1110"),
    ("1112", "Cash in Bank - Main Account", A, "Primary business bank account", "1110"),
    ("1113", "Cash in Bank - Savings", A, "Business savings account", "1110"),
    ("1120", "Accounts Receivable", A, "Money owed by customers", "1100"),
    ("1121", "Trade Receivables", A, "Outstanding customer invoices", "1120"),
    ("1130", "Inventory", A, "Trading inventory", "1100"),
    ("1131", "Stock in Trade", A, "Goods held for resale", "1130"),
    ("1132", "Packaging Materials", A, "Boxes, bags, and other packaging supplies", "1130"),
    ("1140", "Prepaid Expenses", A, "Expenses paid in advance", "1100"),
    ("1200", "Fixed Assets", A, "Long-term physical assets", "1000"),
    ("1210", "Equipment", A, "Business equipment and machinery", "1200"),
    ("1220", "Vehicles", A, "Delivery trucks and transportation", "1200"),
    ("1230", "Furniture & Fixtures", A, "Office and warehouse furniture", "1200"),
    ("2000", "Liabilities", L, "Main liability category", None),
    ("2100", "Current Liabilities", L, "Debts due within one year", "2000"),
    ("2110", "Accounts Payable", L, "Money owed to suppliers", "2100"),
    ("2111", "Trade Payables", L, "Outstanding supplier invoices", "2110"),
    ("2120", "Accrued Expenses", L, "Expenses incurred but not yet paid", "2100"),
    ("2130", "Short-term Loans", L, "Loans due within one year", "2100"),
    ("2200", "Long-term Liabilities", L, "Debts due after one year", "2000"),
    ("2210", "Long-term Loans", L, "Loans with terms over one year", "2200"),
    ("3000", "Equity", E, "Owner's equity and retained earnings", None),
    ("3100", "Owner's Capital", E, "Initial and additional capital contributions", "3000"),
    ("3200", "Retained Earnings", E, "Accumulated profits retained in business", "3000"),
    ("3300", "Owner's Drawings", E, "Money withdrawn by owner", "3000"),
    ("4000", "Revenue", I, "Main revenue category", None),
    ("4100", "Sales Revenue", I, "Income from trading sales", "4000"),
    ("4110", "Sales - Retail", I, "Direct sales to consumers", "4100"),
    ("4120", "Sales - Wholesale", I, "Bulk sales to retailers", "4100"),
    ("4200", "Other Income", I, "Non-trading income", "4000"),
    ("4210", "Interest Income", I, "Interest earned on bank deposits", "4200"),
    ("5000", "Expenses", X, "Main expense category", None),
    ("5100", "Cost of Goods Sold", X, "Direct costs of goods purchased", "5000"),
    ("5110", "Purchases", X, "Cost of goods bought for resale", "5100"),
    ("5120", "Freight In", X, "Transportation costs for incoming goods", "5100"),
    ("5200", "Operating Expenses", X, "Regular business operating costs", "5000"),
    ("5210", "Rent Expense", X, "Warehouse and office rent", "5200"),
    ("5220", "Utilities Expense", X, "Electricity, water, gas bills", "5200"),
    ("5230", "Transportation Expense", X, "Delivery and vehicle costs", "5200"),
    ("5240", "Marketing & Advertising", X, "Promotional and marketing costs", "5200"),
    ("5250", "Insurance Expense", X, "Business insurance premiums", "5200"),
    ("5260", "Professional Services", X, "Legal, accounting, consulting fees", "5200"),
    ("5270", "Bank Charges", X, "Banking fees and charges", "5200"),
    ("5280", "Office Supplies", X, "Stationery and office materials", "5200"),
    ("5290", "Repairs & Maintenance", X, "Equipment and facility maintenance", "5200"),
    ("5300", "Employee Expenses", X, "Staff-related costs", "5000"),
    ("5310", "Salaries & Wages", X, "Employee compensation", "5300"),
    ("5320", "Employee Benefits", X, "Health insurance, retirement contributions", "5300"),
]

# Accounts that settle payments and receipts
SETTLEMENT_CODES = {"1111", "1112", "1113"}


def seed_default_accounts(account_service: AccountService) -> int:
    """Create the default chart, skipping codes that already exist.

    Returns:
        Number of accounts created
    """
    created = 0
    for code, name, account_type, description, parent_code in DEFAULT_ACCOUNTS:
        if account_service.get_account_by_code(code) is not None:
            continue
        parent_id = None
        if parent_code is not None:
            parent = account_service.get_account_by_code(parent_code)
            parent_id = parent.id if parent is not None else None
        account_service.create_account(
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            description=description,
            is_seeded=True,
            can_debit_on_payment=code in SETTLEMENT_CODES,
            can_credit_on_receipt=code in SETTLEMENT_CODES,
        )
        created += 1
    logger.info("Seeded %d default accounts", created)
    return created
