"""
Devnet Accounts
Derives the pre-funded devnet accounts from the seed phrase
"""

from typing import List

from eth_account import Account
from eth_account.hdaccount import key_from_seed
from eth_account.hdaccount.mnemonic import Mnemonic
from eth_account.signers.local import LocalAccount

# Same path ganache and anvil use for their funded accounts
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/{index}"


def derive_account(mnemonic: str, index: int = 0,
                   path_template: str = DEFAULT_DERIVATION_PATH,
                   passphrase: str = "") -> LocalAccount:
    """
    Derive one account from a seed phrase

    Like the devnets themselves, the phrase is not checked against the
    BIP-39 word list checksum; any phrase yields a seed.

    Args:
        mnemonic: Seed phrase
        index: Account index
        path_template: BIP-44 path with an {index} placeholder
        passphrase: Optional BIP-39 passphrase

    Returns:
        LocalAccount
    """
    if index < 0:
        raise ValueError(f"Account index must not be negative: {index}")

    seed = Mnemonic.to_seed(' '.join(mnemonic.split()), passphrase)
    key = key_from_seed(seed, path_template.format(index=index))
    return Account.from_key(key)


def derive_keys(mnemonic: str, count: int = 10,
                path_template: str = DEFAULT_DERIVATION_PATH) -> List[str]:
    """
    Derive the private keys of the first `count` accounts

    Returns:
        Hex-encoded private keys (0x-prefixed)
    """
    return [
        '0x' + derive_account(mnemonic, i, path_template).key.hex().removeprefix('0x')
        for i in range(count)
    ]
