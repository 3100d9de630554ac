"""
LotteryMaster core

Acquisition, statistics and provider-backed analysis for Chinese lottery
draw histories (SSQ, DLT, FC3D).

Modules:
- games: game profiles (cardinalities, ranges, zones)
- records: DrawRecord and the row extractor
- scraper: daily dataset acquisition and loading
- analysis: frequency / gap statistics and the cached StatisticsService
- cache: TTL result cache with single-flight computation
- ai_analysis: prompt building, provider calls and reply parsing
- charts: plotly figures from statistics output
"""

from .ai_analysis import AIAnalysisService
from .analysis import StatisticsService, frequency_distribution, number_statistics
from .cache import RESULT_CACHE, ResultCache
from .games import PROFILES, GameProfile, profile_for
from .records import DrawRecord, extract_record
from .scraper import LotteryScraper, ScrapeResult, latest_dataset, load_dataset

__version__ = "1.0.0"

__all__ = [
    "AIAnalysisService",
    "DrawRecord",
    "GameProfile",
    "LotteryScraper",
    "PROFILES",
    "RESULT_CACHE",
    "ResultCache",
    "ScrapeResult",
    "StatisticsService",
    "extract_record",
    "frequency_distribution",
    "latest_dataset",
    "load_dataset",
    "number_statistics",
    "profile_for",
]
