"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class RiskSettings(BaseSettings):
    """Per-account risk parameters (percent values, 1.0 == 1%)."""

    model_config = SettingsConfigDict(env_prefix="RISK_")

    max_risk_percent_per_trade: Decimal = Decimal("1.0")
    max_daily_loss_percent: Decimal = Decimal("5.0")
    default_sl_percent: Decimal = Decimal("1.0")
    default_tp_percent: Decimal = Decimal("1.5")


class FeatureSettings(BaseSettings):
    """Feature vector construction settings."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    min_candles: int = 50


class StrategySettings(BaseSettings):
    """Rule strategy parameters.

    Defaults follow the usual textbook settings for each indicator.
    All fields configurable via STRATEGY_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="STRATEGY_")

    # RSI
    rsi_period: int = 14
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # EMA crossover
    ema_fast: int = 9
    ema_slow: int = 21

    # Stochastic
    stoch_k_period: int = 14
    stoch_d_period: int = 3
    stoch_overbought: float = 80.0
    stoch_oversold: float = 20.0

    # Williams %R
    williams_period: int = 14
    williams_overbought: float = -20.0
    williams_oversold: float = -80.0

    # Bollinger bands
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0


class PredictionSettings(BaseSettings):
    """Prediction pipeline settings."""

    model_config = SettingsConfigDict(env_prefix="PREDICTION_")

    min_candles: int = 50
    horizons: list[str] = ["5m", "1h", "4h"]
    demo_seed: int | None = None  # None = OS entropy for demo signals


class FusionSettings(BaseSettings):
    """Weights and thresholds for fusing model and strategy votes."""

    model_config = SettingsConfigDict(env_prefix="FUSION_")

    ai_weight: float = 0.6
    strategy_weight: float = 0.4
    decision_threshold: float = 0.4  # Min weighted score to emit BUY/SELL
    min_confidence: float = 0.5
    max_confidence: float = 0.95


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    risk: RiskSettings = RiskSettings()
    features: FeatureSettings = FeatureSettings()
    strategies: StrategySettings = StrategySettings()
    prediction: PredictionSettings = PredictionSettings()
    fusion: FusionSettings = FusionSettings()
