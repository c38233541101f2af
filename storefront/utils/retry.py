# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.domain.errors import CartConflictError
from storefront.utils.settings import ADD_TO_CART_ATTEMPTS


def conflict_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(ADD_TO_CART_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(CartConflictError),
    )
