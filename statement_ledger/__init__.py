"""Statement ledger: deposits, withdrawals and transfers with derived balances."""
