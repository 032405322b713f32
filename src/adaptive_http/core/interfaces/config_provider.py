from abc import ABC, abstractmethod

from adaptive_http.core.config import InvocationConfig

class ConfigProviderPort(ABC):
    @abstractmethod
    def get_invocation_config(self) -> InvocationConfig:
        """Return the configuration the engine is built with.

        Read once by the composition root; later changes are not observed.
        """
        pass
