"""Pip Value Resolver — monetary value of one pip/point per standard lot."""

from loguru import logger

from forex_helper.errors import MissingConversionError, MissingPriceError
from forex_helper.models.currency import AccountCurrency, CurrencyPair
from forex_helper.models.sizing import PipValue
from forex_helper.rates import RateProvider

# One pip on a standard lot of an XXX/USD pair is worth 10 USD
STANDARD_PIP_VALUE_USD = 10.0
# One gold point on a standard lot is worth 1 unit of the quote currency
METAL_POINT_VALUE = 1.0


class PipValueResolver:
    def __init__(self, rate_provider: RateProvider | None = None):
        self.rate_provider = rate_provider

    async def resolve(
        self,
        pair: CurrencyPair,
        account_currency: AccountCurrency,
        current_price: float | None = None,
    ) -> PipValue:
        """Resolve the per-lot pip value in the account currency.

        Raises:
            MissingPriceError: a USD/XXX pair needs ``current_price``.
            MissingConversionError: a conversion rate is unavailable.
        """
        account = account_currency.code

        if pair.is_metal():
            return PipValue(value=METAL_POINT_VALUE, currency=pair.quote)

        if pair.is_usd_quoted() and account == "USD":
            return PipValue(value=STANDARD_PIP_VALUE_USD, currency="USD")

        if pair.is_usd_based() and account == "USD":
            price = self._require_price(pair, current_price)
            return PipValue(value=STANDARD_PIP_VALUE_USD / price, currency="USD")

        return await self._resolve_with_conversion(pair, account, current_price)

    async def _resolve_with_conversion(
        self, pair: CurrencyPair, account: str, current_price: float | None
    ) -> PipValue:
        # USD-denominated starting value, carried through quote -> account
        if pair.is_usd_based():
            value = STANDARD_PIP_VALUE_USD / self._require_price(pair, current_price)
        else:
            value = STANDARD_PIP_VALUE_USD

        if pair.quote != "USD":
            value *= await self._rate("USD", pair.quote)
        if pair.quote != account:
            value *= await self._rate(pair.quote, account)

        logger.debug(f"Pip value {pair.code} in {account}: {value}")
        return PipValue(value=value, currency=account)

    async def _rate(self, from_currency: str, to_currency: str) -> float:
        if self.rate_provider is None:
            raise MissingConversionError(
                "Exchange rate provider is required for cross pairs or a different account currency"
            )
        rate = await self.rate_provider.get_rate(from_currency, to_currency)
        if rate is None or rate <= 0:
            raise MissingConversionError(
                f"Invalid exchange rate {rate!r} for {from_currency} -> {to_currency}"
            )
        return rate

    @staticmethod
    def _require_price(pair: CurrencyPair, current_price: float | None) -> float:
        if current_price is None or current_price <= 0:
            raise MissingPriceError(f"Current price is required for {pair.display_name} pairs")
        return current_price
