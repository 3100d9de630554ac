"""
Prompt templates and fallback result structures for the analysis provider.

Templates carry a literal `{data}` placeholder which is substituted with
str.replace (the surrounding JSON braces rule out str.format).
"""

STRUCTURED_SYSTEM_PROMPT = """您是彩票数据建模专家+彩票数据分析师，你擅长以下能力：
1. 数据统计和概率分析
2. 模式识别和趋势预测
3. 历史数据分析
4. 遗漏值分析
5. 走势图解读
6. 中奖规律研究
7. 奇偶比例分析

你需要遵守以下基本原则：

1. 数据建模要求：
   - 使用贝叶斯概率计算号码出现概率
   - 构建马尔可夫链预测短期走势
   - 应用时间序列分析长期趋势
   - 奇偶比采用卡方检验验证合理性

2. 综合评分系统：
   - 高频权重：40%（近30期出现率）
   - 热度权重：30%（近10期出现次数）
   - 冷门权重：20%（遗漏值临界点）
   - 奇偶权重：10%（与推荐比匹配度）
   - 权重期数根据输入的数据量大小动态调整

3. 特别注意：
   - 热号定义：近N期出现次数 ≥ (N × 0.3)，其中 N = min(总期数 × 0.05, 30)
   - 冷号定义：
     前区：当前遗漏值 ≥ (平均遗漏值 × 1.5)
     后区：当前遗漏值 ≥ (平均遗漏值 × 1.2)
   - 趋势拐点需满足：近3期走势方向与近10期趋势相反
   - 必须包含号码组合的置信区间（95%置信水平）

你的任务是分析彩票数据并提供结构化的JSON数据。

无论分析结果如何，都要提醒用户彩票有风险，投注需谨慎，量力而行。"""

STRUCTURED_ANALYSIS_TEMPLATE = """请分析以下彩票数据，并提供结构化的分析结果。

数据如下（按开奖顺序，最后一条为最新一期）：
{data}

请严格按照以下JSON结构返回分析结果（必须是合法有效的JSON格式）：

```json
{
  "frequencyAnalysis": {
    "frontZone": [{"number": 数字, "frequency": 频率}],
    "backZone": [{"number": 数字, "frequency": 频率}]
  },
  "hotColdAnalysis": {
    "frontZone": {"hotNumbers": [], "coldNumbers": [], "risingNumbers": []},
    "backZone": {"hotNumbers": [], "coldNumbers": [], "risingNumbers": []}
  },
  "missingAnalysis": {
    "frontZone": {"maxMissingNumber": 当前最大遗漏号码, "missingTrend": "近期遗漏走势描述", "warnings": []},
    "backZone": {"missingStatus": "当前遗漏状况描述", "warnings": []}
  },
  "trendAnalysis": {
    "frontZoneFeatures": [],
    "backZoneFeatures": [],
    "keyTurningPoints": []
  },
  "oddEvenAnalysis": {
    "frontZoneRatio": "前区奇偶比描述",
    "backZoneRatio": "后区奇偶比描述",
    "recommendedRatio": "推荐的奇偶比"
  },
  "recommendations": [
    {"strategy": "频率优先", "frontZone": [], "backZone": [], "rationale": "基于高频号码组合"},
    {"strategy": "冷热平衡", "frontZone": [], "backZone": [], "rationale": "热号延续+冷号补位"},
    {"strategy": "趋势拐点", "frontZone": [], "backZone": [], "rationale": "基于关键转折点选择"}
  ],
  "topRecommendation": {"frontZone": [], "backZone": [], "rationale": "综合评分最高组合"},
  "riskWarnings": ["理性购彩提醒", "历史数据局限性", "彩票随机性说明"]
}
```

要求：
1. 仅返回 ```json 代码块包裹的纯 JSON 内容，不包含任何额外解释文字
2. 所有推荐必须符合彩票规则：
   - 双色球：前区6个/后区1个
   - 大乐透：前区5个/后区2个
3. topRecommendation 与 recommendations 中的任何一组不完全重复
4. 奇偶比必须与推荐理由中的平衡要求一致"""

FC3D_SYSTEM_PROMPT = """您是福彩3D数据分析师，你擅长以下能力：
1. 百位、十位、个位的独立频率统计
2. 和值与跨度分析
3. 组六、组三形态分析
4. 遗漏值分析
5. 奇偶比例分析

每一期开奖号码由三个0-9的数字组成，各位置相互独立。

你的任务是分析彩票数据并提供结构化的JSON数据。

无论分析结果如何，都要提醒用户彩票有风险，投注需谨慎，量力而行。"""

FC3D_STRUCTURED_ANALYSIS_TEMPLATE = """请分析以下福彩3D数据，并提供结构化的分析结果。

数据如下（按开奖顺序，最后一条为最新一期，primary 依次为百位、十位、个位）：
{data}

请严格按照以下JSON结构返回分析结果（必须是合法有效的JSON格式）：

```json
{
  "frequencyAnalysis": {
    "hundredsPlace": [{"number": 数字, "frequency": 频率}],
    "tensPlace": [{"number": 数字, "frequency": 频率}],
    "onesPlace": [{"number": 数字, "frequency": 频率}],
    "sumValue": {"mostFrequent": [], "distribution": "和值分布描述"}
  },
  "hotColdAnalysis": {
    "hundredsPlace": {"hotNumbers": [], "coldNumbers": []},
    "tensPlace": {"hotNumbers": [], "coldNumbers": []},
    "onesPlace": {"hotNumbers": [], "coldNumbers": []}
  },
  "missingAnalysis": {
    "hundredsPlace": {"maxMissingNumber": 数字, "missingTrend": "描述"},
    "tensPlace": {"maxMissingNumber": 数字, "missingTrend": "描述"},
    "onesPlace": {"maxMissingNumber": 数字, "missingTrend": "描述"}
  },
  "spanAnalysis": {"currentSpan": 数字, "spanTrend": "跨度走势描述", "recommendedSpan": []},
  "oddEvenAnalysis": {"currentRatio": "", "ratioTrend": "", "recommendedRatio": ""},
  "groupAnalysis": {
    "groupDistribution": {"group6": "", "group3": "", "groupTrend": ""},
    "currentPattern": ""
  },
  "recommendations": [
    {"strategy": "策略名称", "numbers": [百位, 十位, 个位], "rationale": "推荐理由"}
  ],
  "topRecommendation": {
    "directSelection": [[百位, 十位, 个位]],
    "groupSelection": {"type": "组六或组三", "numbers": []},
    "rationale": "综合推荐理由"
  },
  "riskWarnings": ["理性购彩提醒", "历史数据局限性", "彩票随机性说明"]
}
```

要求：
1. 仅返回 ```json 代码块包裹的纯 JSON 内容，不包含任何额外解释文字
2. 每个位置的号码必须在0-9之间"""


def system_prompt_for(game_id: str) -> str:
    """System prompt with the game-specific rule reminder appended."""
    if game_id == "FC3D":
        return f"{FC3D_SYSTEM_PROMPT}\n\n当前分析的是福彩3D数据，请严格按照对应的号码规则进行分析。"
    name = "双色球" if game_id == "SSQ" else "大乐透"
    return f"{STRUCTURED_SYSTEM_PROMPT}\n\n当前分析的是{name}数据，请严格按照对应的号码规则进行分析。"


def template_for(game_id: str) -> str:
    return FC3D_STRUCTURED_ANALYSIS_TEMPLATE if game_id == "FC3D" else STRUCTURED_ANALYSIS_TEMPLATE


# ---------------------------------------------------------------------------
# Fallback structures (fresh copies on every call)
# ---------------------------------------------------------------------------

def default_standard_result() -> dict:
    """Zero-valued result for SSQ / DLT."""
    return {
        "frequencyAnalysis": {"frontZone": [], "backZone": []},
        "hotColdAnalysis": {
            "frontZone": {"hotNumbers": [], "coldNumbers": [], "risingNumbers": []},
            "backZone": {"hotNumbers": [], "coldNumbers": [], "risingNumbers": []},
        },
        "missingAnalysis": {
            "frontZone": {"maxMissingNumber": 0, "missingTrend": "", "warnings": []},
            "backZone": {"missingStatus": "", "warnings": []},
        },
        "trendAnalysis": {
            "frontZoneFeatures": [],
            "backZoneFeatures": [],
            "keyTurningPoints": [],
        },
        "oddEvenAnalysis": {
            "frontZoneRatio": "",
            "backZoneRatio": "",
            "recommendedRatio": "",
        },
        "recommendations": [],
        "topRecommendation": {"frontZone": [], "backZone": [], "rationale": ""},
        "riskWarnings": [],
    }


def default_fc3d_result() -> dict:
    """Zero-valued result for FC3D."""
    places = ("hundredsPlace", "tensPlace", "onesPlace")
    return {
        "frequencyAnalysis": {
            **{place: [] for place in places},
            "sumValue": {"mostFrequent": [], "distribution": ""},
        },
        "hotColdAnalysis": {place: {"hotNumbers": [], "coldNumbers": []} for place in places},
        "missingAnalysis": {
            place: {"maxMissingNumber": 0, "missingTrend": ""} for place in places
        },
        "spanAnalysis": {"currentSpan": 0, "spanTrend": "", "recommendedSpan": []},
        "oddEvenAnalysis": {"currentRatio": "", "ratioTrend": "", "recommendedRatio": ""},
        "groupAnalysis": {
            "groupDistribution": {"group6": "", "group3": "", "groupTrend": ""},
            "currentPattern": "",
        },
        "recommendations": [],
        "topRecommendation": {
            "directSelection": [],
            "groupSelection": {"type": "", "numbers": []},
            "rationale": "",
        },
        "riskWarnings": [],
    }


def default_result(game_id: str) -> dict:
    return default_fc3d_result() if game_id == "FC3D" else default_standard_result()
