"""Tests for the transcript trade extractor."""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError

import pytest

from traders_voice.parsers.trade_extractor import (
    TradeRecord,
    compact_record,
    detect_indicators,
    detect_leverage,
    detect_position_size,
    detect_quantity,
    detect_ticker,
    detect_timeframe,
    extract_trade_info,
    extract_trade_record,
    parse_number,
)


class TestActionDetection:
    def test_buy_cues(self):
        assert extract_trade_info("Buy AAPL")["action"] == "buy"
        assert extract_trade_info("buying some shares")["action"] == "buy"
        assert extract_trade_info("I bought yesterday")["action"] == "buy"
        assert extract_trade_info("going long on this")["action"] == "buy"

    def test_open_long_is_buy(self):
        assert extract_trade_info("Open long BTC USDT")["action"] == "buy"
        assert extract_trade_info("Opening long position")["action"] == "buy"

    def test_sell_cues(self):
        assert extract_trade_info("Sell TSLA")["action"] == "sell"
        assert extract_trade_info("selling my position")["action"] == "sell"
        assert extract_trade_info("I sold it")["action"] == "sell"
        assert extract_trade_info("going short")["action"] == "sell"
        assert extract_trade_info("closing the position")["action"] == "sell"

    def test_open_short_is_sell(self):
        assert extract_trade_info("Open short ETH")["action"] == "sell"
        assert extract_trade_info("Opening short position")["action"] == "sell"

    def test_trade_type_paired_with_action(self):
        assert extract_trade_info("Buy AAPL")["tradeType"] == "long"
        assert extract_trade_info("Sell TSLA")["tradeType"] == "short"

    def test_buy_cue_checked_before_sell_cue(self):
        result = extract_trade_info("Sold my calls, now buying AAPL")
        assert result["action"] == "buy"
        assert result["tradeType"] == "long"

    def test_direction_and_ticker_only(self):
        assert extract_trade_info("Buy AAPL") == {
            "ticker": "AAPL",
            "action": "buy",
            "tradeType": "long",
        }


class TestExchangeDetection:
    def test_known_exchange_capitalized(self):
        assert extract_trade_info("Long BTC USDT on Binance")["exchange"] == "Binance"
        assert extract_trade_info("bought SOL on gate.io")["exchange"] == "Gate.io"
        assert extract_trade_info("Buy SOL on crypto.com")["exchange"] == "Crypto.com"
        assert extract_trade_info("long ETH on OKX")["exchange"] == "Okx"

    def test_list_order_wins_over_mention_order(self):
        result = extract_trade_info("Long BTC USDT on Kraken, hedged on Binance")
        assert result["exchange"] == "Binance"


class TestTimeframeDetection:
    @pytest.mark.parametrize("text,expected", [
        ("Long BTC on the 4-hour chart", "4h"),
        ("fifteen minutes chart", "15m"),
        ("15 minutes chart", "15m"),
        ("5 minutes chart", "5m"),
        ("1 hour chart", "1h"),
        ("hourly close", "1h"),
        ("Buy AAPL on the daily", "1D"),
        ("weekly structure", "1W"),
        ("monthly candle", "1M"),
    ])
    def test_variants(self, text, expected):
        assert detect_timeframe(text) == expected

    def test_no_timeframe(self):
        assert detect_timeframe("Buy AAPL") is None


class TestIndicatorDetection:
    def test_mhcd_corrected_to_macd(self):
        result = extract_trade_info("Long BTC USDT, RSI oversold MHCD crossover")
        assert result["indicators"] == ["RSI", "MACD"]
        assert "MHCD" not in result["indicators"]

    def test_mac_d_corrected(self):
        assert detect_indicators("Buy AAPL, MAC D cross") == ("MACD",)

    def test_variants_deduplicated(self):
        assert detect_indicators("MACD and MHCD and MCD") == ("MACD",)
        assert detect_indicators("lower Bollinger Bands") == ("BOLLINGER",)

    def test_order_of_first_mention(self):
        assert detect_indicators("EMA cross with RSI divergence") == ("EMA", "RSI")

    def test_whole_word_only(self):
        assert detect_indicators("the system is gradual") == ()


class TestLeverageDetection:
    def test_n_x_leverage(self):
        assert detect_leverage("Long BTC USDT 10x leverage") == 10

    def test_leverage_of(self):
        assert detect_leverage("Short ETH with leverage of 20x") == 20

    def test_using_n_x(self):
        assert detect_leverage("Long SOL using 5x") == 5

    def test_n_x_long(self):
        assert detect_leverage("3x long on SOL USDT") == 3

    def test_out_of_range_falls_through(self):
        assert detect_leverage("200x leverage on BTC USDT, going with 50x instead") == 50
        assert detect_leverage("200x leverage") is None

    def test_leverage_in_record(self):
        assert extract_trade_info("Long BTC USDT 10x leverage")["leverage"] == 10

    def test_overlong_digit_run_ignored(self):
        assert detect_leverage("leverage " + "9" * 5000) is None
        assert detect_leverage("1000x leverage") is None
        result = extract_trade_info("Long BTC USDT leverage " + "9" * 5000)
        assert result["ticker"] == "BTC/USDT"
        assert "leverage" not in result


class TestTickerDetection:
    def test_spoken_pair(self):
        assert detect_ticker("Buy bitcoin tether") == "BTC/USDT"
        assert detect_ticker("short the euro dollar") == "EUR/USD"

    def test_crypto_name_with_attached_quote(self):
        assert detect_ticker("Long Bitcoin USDT") == "BTC/USDT"

    def test_crypto_name_with_quote_elsewhere(self):
        assert detect_ticker("Long Bitcoin, 500 USD") == "BTC/USD"

    def test_bare_crypto_name(self):
        assert detect_ticker("Going long on Bitcoin at 95,000") == "BTC"
        assert detect_ticker("Buy Binance Coin") == "BNB"

    def test_symbolic_pairs(self):
        assert detect_ticker("Open Long BTC USDT") == "BTC/USDT"
        assert detect_ticker("Buy BTC/USDT at 50000") == "BTC/USDT"
        assert detect_ticker("Long ETHUSDT") == "ETH/USDT"
        assert detect_ticker("Buy SOL USDT") == "SOL/USDT"
        assert detect_ticker("Long DOGE USD") == "DOGE/USD"
        assert detect_ticker("Trade ARB/USDT") == "ARB/USDT"
        assert detect_ticker("Short LINK-USDC") == "LINK/USDC"

    def test_pair_in_full_extraction(self):
        assert extract_trade_info("Long ETHUSDT")["ticker"] == "ETH/USDT"
        assert extract_trade_info("Open Long BTC USDT")["ticker"] == "BTC/USDT"

    def test_stock_tickers(self):
        assert detect_ticker("Buy AAPL") == "AAPL"
        assert detect_ticker("Sell TSLA now") == "TSLA"
        assert detect_ticker("NVDA is looking good") == "NVDA"
        assert detect_ticker("Buy SPY calls") == "SPY"
        assert detect_ticker("Long QQQ") == "QQQ"

    def test_contextual_ticker(self):
        assert detect_ticker("Buy PLTR at 25") == "PLTR"
        assert detect_ticker("Ticker HOOD looking strong") == "HOOD"

    def test_excluded_words_are_not_tickers(self):
        assert "ticker" not in extract_trade_info("stop loss at 86000")
        assert "ticker" not in extract_trade_info("500 USD position")
        result = extract_trade_info("Buy the dip")
        assert result == {"action": "buy", "tradeType": "long"}


class TestNumberParsing:
    def test_comma_grouped(self):
        assert parse_number("86,000") == 86000.0
        assert parse_number("1,234.5") == 1234.5
        assert parse_number("150") == 150.0

    def test_malformed_is_absent(self):
        assert parse_number("") is None
        assert parse_number(None) is None
        assert parse_number(",") is None
        assert parse_number("abc") is None
        assert parse_number("nan") is None

    def test_thousands_in_transcript(self):
        assert extract_trade_info("Stop loss at 86,000")["stopLoss"] == 86000
        assert extract_trade_info("stop loss at 86,000")["stopLoss"] == extract_trade_info(
            "stop loss at 86000"
        )["stopLoss"]
        assert extract_trade_info("Take profit at 94,000")["takeProfit"] == 94000

    def test_mixed_comma_formats(self):
        result = extract_trade_info("Buy BTC USDT, stop loss at 85,500, take profit at 95,000")
        assert result["stopLoss"] == 85500
        assert result["takeProfit"] == 95000


class TestPositionSize:
    def test_usd(self):
        assert extract_trade_info("500 USD position")["positionSize"] == 500

    def test_dollars(self):
        assert extract_trade_info("1000 dollars position size")["positionSize"] == 1000

    def test_usdt(self):
        assert extract_trade_info("Trade 2500 USDT")["positionSize"] == 2500

    def test_position_size_of(self):
        assert extract_trade_info("Long BTC USDT, position size of 5,000")["positionSize"] == 5000

    def test_out_of_range(self):
        assert extract_trade_info("5 USD position") is None
        assert "positionSize" not in extract_trade_info("Long BTC USDT 20,000,000 USD")


class TestPriceExtraction:
    def test_dollar_price(self):
        assert extract_trade_info("Buy at $150")["price"] == 150

    def test_entry_price(self):
        assert extract_trade_info("Entry at 175")["price"] == 175

    def test_each_price(self):
        result = extract_trade_info("Picked up AMD $42.50 each")
        assert result["ticker"] == "AMD"
        assert result["price"] == 42.5

    def test_stop_loss_not_read_as_price(self):
        result = extract_trade_info("Buy AAPL stop loss at $140")
        assert "price" not in result
        assert result["stopLoss"] == 140

    def test_rejected_candidate_falls_through_to_next_pattern(self):
        result = extract_trade_info("Stop loss at 140, long at $150")
        assert result["price"] == 150
        assert result["stopLoss"] == 140


class TestQuantityExtraction:
    def test_shares(self):
        assert extract_trade_info("Buy 100 shares")["quantity"] == 100
        assert extract_trade_info("50 shares of AAPL")["quantity"] == 50

    def test_contracts(self):
        assert extract_trade_info("Buy 10 contracts")["quantity"] == 10

    def test_action_followed_by_count(self):
        assert extract_trade_info("Sell 200 TSLA")["quantity"] == 200

    def test_quantity_of(self):
        assert extract_trade_info("quantity of 25")["quantity"] == 25

    def test_currency_amount_is_not_quantity(self):
        result = extract_trade_info("Buy 500 USD of BTC")
        assert "quantity" not in result
        assert result["positionSize"] == 500

    @pytest.mark.parametrize("text,expected", [
        ("Buy 0 shares", None),
        ("1,000,000 shares", None),
        ("999,999 shares", 999999),
        ("quantity of 0", None),
    ])
    def test_range(self, text, expected):
        assert detect_quantity(text) == expected


class TestLongInput:
    def test_long_digit_run_is_linear(self):
        text = "Buy AAPL " + "1" * 20000 + " end"
        start = time.perf_counter()
        result = extract_trade_info(text)
        assert time.perf_counter() - start < 2.0
        assert result["ticker"] == "AAPL"
        assert "quantity" not in result
        assert "positionSize" not in result

    def test_long_comma_run(self):
        start = time.perf_counter()
        assert extract_trade_info("," * 20000 + " shares") is None
        assert time.perf_counter() - start < 2.0

    def test_overlong_number_skipped_not_truncated(self):
        result = extract_trade_info("Buy AAPL at " + "9" * 25)
        assert "price" not in result
        assert detect_position_size("9" * 25 + " USD") is None


class TestStopLoss:
    def test_formats(self):
        assert extract_trade_info("Stop loss at $140")["stopLoss"] == 140
        assert extract_trade_info("SL at 135")["stopLoss"] == 135
        assert extract_trade_info("Stop at 145.50")["stopLoss"] == 145.5
        assert extract_trade_info("Set stop at 130")["stopLoss"] == 130

    def test_whisper_mishearings(self):
        assert extract_trade_info("Stopplers at 92000")["stopLoss"] == 92000
        assert extract_trade_info("Stoppers at 150")["stopLoss"] == 150
        assert extract_trade_info("stop plus at 3,400")["stopLoss"] == 3400
        assert extract_trade_info("S.L. 2600 on ETH USDT")["stopLoss"] == 2600

    def test_ticker_containing_sl_untouched(self):
        result = extract_trade_info("Sell TSLA, SL at 250")
        assert result["ticker"] == "TSLA"
        assert result["stopLoss"] == 250


class TestTakeProfit:
    def test_formats(self):
        assert extract_trade_info("Take profit at $200")["takeProfit"] == 200
        assert extract_trade_info("TP at 175")["takeProfit"] == 175
        assert extract_trade_info("Target 180")["takeProfit"] == 180
        assert extract_trade_info("Target is 2,800")["takeProfit"] == 2800
        assert extract_trade_info("profit at 50")["takeProfit"] == 50


class TestBreakEven:
    def test_break_even_price(self):
        assert extract_trade_info("Long BTC, break even at 96,000")["breakEven"] == 96000

    def test_move_to_break_even_without_price(self):
        assert extract_trade_info("Long ETH, move stop to breakeven")["breakEven"] is True
        assert extract_trade_info("Sell TSLA, moved to break even")["breakEven"] is True

    def test_break_even_alone_is_not_a_trade(self):
        assert extract_trade_info("move to breakeven") is None


class TestValidityGate:
    @pytest.mark.parametrize("value", [None, "", 42, ["Buy AAPL"], b"Buy AAPL"])
    def test_non_string_or_empty(self, value):
        assert extract_trade_info(value) is None
        assert extract_trade_record(value) is None

    def test_non_trade_text(self):
        assert extract_trade_info("Hello world") is None
        assert extract_trade_info("The weather is nice") is None

    def test_context_alone_is_not_a_trade(self):
        assert extract_trade_info("RSI on the daily chart") is None
        assert extract_trade_info("RSI is overbought") is None


class TestRealWorldScenarios:
    def test_crypto_trade_with_large_numbers(self):
        result = extract_trade_info(
            "Open Long BTC USDT, Mean Reversion Trade, 500 USD, stop loss at 86,000, "
            "take profit at 94,000 USD."
        )
        assert result == {
            "ticker": "BTC/USDT",
            "action": "buy",
            "tradeType": "long",
            "positionSize": 500,
            "stopLoss": 86000,
            "takeProfit": 94000,
        }

    def test_stock_trade_with_shares(self):
        result = extract_trade_info(
            "Buy 100 shares of AAPL at $150 with stop loss at $140 and take profit at $170"
        )
        assert result["ticker"] == "AAPL"
        assert result["action"] == "buy"
        assert result["quantity"] == 100
        assert result["price"] == 150
        assert result["stopLoss"] == 140
        assert result["takeProfit"] == 170

    def test_short_trade(self):
        result = extract_trade_info("Open short ETH USDT at 2500, SL 2600, TP 2300")
        assert result["ticker"] == "ETH/USDT"
        assert result["action"] == "sell"
        assert result["tradeType"] == "short"
        assert result["price"] == 2500
        assert result["stopLoss"] == 2600
        assert result["takeProfit"] == 2300

    def test_whisper_transcription_errors(self):
        result = extract_trade_info(
            "Long Bitcoin on Binance at 95000 Stopplers at 92000 take profit at 105000 "
            "4-hour chart RSI oversold MHCD crossover"
        )
        assert result["ticker"] == "BTC"
        assert result["action"] == "buy"
        assert result["tradeType"] == "long"
        assert result["price"] == 95000
        assert result["stopLoss"] == 92000
        assert result["takeProfit"] == 105000
        assert result["exchange"] == "Binance"
        assert result["timeframe"] == "4h"
        assert result["indicators"] == ["RSI", "MACD"]


class TestRecord:
    def test_sparse_output_has_no_empty_values(self):
        for text in (
            "Buy AAPL",
            "Open short ETH USDT at 2500, SL 2600, TP 2300",
            "Long Bitcoin on Binance at 95000 Stopplers at 92000 4-hour chart RSI",
        ):
            result = extract_trade_info(text)
            assert all(value not in (None, "", [], ()) for value in result.values())

    def test_compact_record(self):
        assert compact_record(TradeRecord(ticker="AAPL")) == {"ticker": "AAPL"}
        assert compact_record(TradeRecord(break_even=True, indicators=("RSI",))) == {
            "indicators": ["RSI"],
            "breakEven": True,
        }
        assert compact_record(TradeRecord()) == {}

    def test_has_trade_info(self):
        assert not TradeRecord(timeframe="4h", indicators=("RSI",)).has_trade_info
        assert not TradeRecord(break_even=True, leverage=5).has_trade_info
        assert TradeRecord(stop_loss=100.0).has_trade_info
        assert TradeRecord(price=0.0).has_trade_info

    def test_record_is_immutable(self):
        record = extract_trade_record("Buy AAPL")
        with pytest.raises(FrozenInstanceError):
            record.ticker = "MSFT"

    def test_typed_record_matches_sparse_dict(self):
        record = extract_trade_record("Open short ETH USDT at 2500, SL 2600")
        assert record.trade_type == "short"
        assert record.stop_loss == 2600
        assert compact_record(record) == extract_trade_info("Open short ETH USDT at 2500, SL 2600")

    def test_concurrent_calls_agree(self):
        text = "Long Bitcoin on Binance at 95000 Stopplers at 92000 take profit at 105000 RSI"
        expected = extract_trade_info(text)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(extract_trade_info, [text] * 64))
        assert all(result == expected for result in results)
