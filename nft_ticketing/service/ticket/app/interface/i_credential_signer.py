from abc import ABC, abstractmethod
from typing import List


class ICredentialSigner(ABC):
    @property
    @abstractmethod
    def address(self) -> str:
        """Lowercase Ethereum-style address of the signing key."""
        pass

    @abstractmethod
    def sign_message(self, message: str) -> str:
        """Returns a 0x-prefixed 65-byte (r, s, v) signature."""
        pass

    @abstractmethod
    def recover_addresses(self, message: str, signature: str) -> List[str]:
        """Candidate signer addresses; empty for a malformed signature."""
        pass

    def verify(self, message: str, signature: str, expected_signer: str) -> bool:
        return expected_signer.lower() in self.recover_addresses(message, signature)
