"""
Pattern, gazetteer and keyword tables used by the entity and relation extractors.

Tables are immutable and handed to the extractors at construction time, so a
test (or a deployment for another language) can substitute its own set. The
defaults target Chinese prose: context-trigger regular expressions per entity
type, a gazetteer of well-known place names, and trigger keywords per relation
type.

A JSON file can override any of the three tables:

    {
        "entity_patterns": {"Person": ["...regex..."], "Date": ["..."]},
        "gazetteer": ["北京", "上海"],
        "relation_keywords": {"Located": ["位于"], "Related": ["相关"]}
    }

Keys that are absent keep their default table. Order inside
``relation_keywords`` is significant: the first relation type whose keyword
list matches a sentence wins.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Pattern, Sequence, Tuple, Union

from config.settings import settings
from knowledge.entity_models import EntityType, RelationType

logger = logging.getLogger(__name__)

CJK = r"[\u4e00-\u9fa5]"


def _followed_by(words: Sequence[str]) -> str:
    return "(?=" + "|".join(re.escape(w) for w in words) + ")"


def _preceded_by(words: Sequence[str]) -> str:
    # re only accepts fixed-width lookbehinds; one lookbehind per trigger word
    # keeps mixed-length triggers legal.
    return "(?:" + "|".join(f"(?<={re.escape(w)})" for w in dict.fromkeys(words)) + ")"


def _ending_with(words: Sequence[str]) -> str:
    return "(?:" + "|".join(re.escape(w) for w in words) + ")"


PERSON_VERBS = [
    "说", "道", "认为", "表示", "指出", "强调", "提到", "发现", "发明", "创造", "建立", "创建",
]
PERSON_TITLES = ["作者", "学者", "教授", "博士", "先生", "女士", "老师", "专家"]
ORGANIZATION_SUFFIXES = [
    "公司", "集团", "企业", "机构", "大学", "学院", "研究所", "研究院", "医院", "政府",
    "部门", "组织", "协会", "学会", "银行", "基金",
]
LOCATION_SUFFIXES = [
    "省", "市", "县", "区", "镇", "村", "岛", "山", "河", "湖", "海", "洋", "洲", "国", "地区",
]
LOCATION_PREPOSITIONS = [
    "位于", "在", "来自", "前往", "到达", "去", "到", "离开", "回到", "出生于", "居住于", "生活在",
]
LOCATION_AREA_WORDS = ["地区", "一带", "附近", "周边", "境内"]
EVENT_SUFFIXES = [
    "会议", "大会", "活动", "比赛", "战争", "革命", "运动", "事件", "事故", "灾难", "发明", "发现",
]
CONCEPT_WORDS = ["理论", "概念", "原理", "方法", "技术", "模式", "系统", "框架", "模型"]

DEFAULT_ENTITY_PATTERNS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.PERSON: (
        CJK + "{2,4}" + _followed_by(PERSON_VERBS),
        _preceded_by(PERSON_TITLES) + CJK + "{2,4}",
    ),
    EntityType.ORGANIZATION: (
        CJK + "+" + _ending_with(ORGANIZATION_SUFFIXES),
    ),
    EntityType.LOCATION: (
        CJK + "+" + _ending_with(LOCATION_SUFFIXES),
        _preceded_by(LOCATION_PREPOSITIONS) + CJK + "{2,10}",
        CJK + "{2,10}" + _followed_by(LOCATION_AREA_WORDS),
    ),
    EntityType.DATE: (
        r"[0-9]{4}年[0-9]{1,2}月[0-9]{1,2}日",
        r"[0-9]{4}年[0-9]{1,2}月",
        r"[0-9]{1,2}月[0-9]{1,2}日",
    ),
    EntityType.EVENT: (
        CJK + "+" + _ending_with(EVENT_SUFFIXES),
    ),
    EntityType.CONCEPT: (
        CJK + "{2,8}" + _followed_by(CONCEPT_WORDS),
        _preceded_by(CONCEPT_WORDS) + CJK + "{2,8}",
    ),
}

DEFAULT_GAZETTEER: Tuple[str, ...] = tuple(dict.fromkeys([
    # Major Chinese cities
    "北京", "上海", "广州", "深圳", "杭州", "南京", "苏州", "成都", "重庆", "武汉",
    "西安", "天津", "青岛", "大连", "厦门", "宁波", "无锡", "长沙", "郑州", "济南",
    "福州", "哈尔滨", "沈阳", "长春", "昆明", "贵阳", "南宁", "海口", "兰州", "银川",
    "西宁", "乌鲁木齐", "拉萨", "呼和浩特", "石家庄", "太原", "合肥", "南昌", "台北",
    "香港", "澳门", "珠海", "佛山", "东莞", "惠州", "汕头", "湛江", "温州", "绍兴",
    "嘉兴", "湖州", "金华", "舟山", "常州", "扬州", "镇江", "徐州", "南通", "连云港",
    "盐城", "淮安", "宿迁", "烟台", "威海", "潍坊", "淄博", "临沂", "济宁", "泰安",
    "日照", "洛阳", "开封", "安阳", "南阳", "宜昌", "襄阳", "荆州", "岳阳", "株洲",
    "湘潭", "衡阳", "常德", "九江", "赣州", "景德镇", "泉州", "漳州", "莆田", "芜湖",
    "蚌埠", "安庆", "绵阳", "宜宾", "泸州", "遵义", "大理", "西双版纳", "柳州", "保定",
    "唐山", "秦皇岛", "邯郸", "承德", "张家口", "大同", "包头", "鄂尔多斯", "鞍山", "抚顺",
    "丹东", "锦州", "大庆", "齐齐哈尔", "牡丹江", "延安", "宝鸡", "咸阳", "汉中", "天水",
    "嘉峪关", "喀什", "吐鲁番", "伊犁", "日喀则", "格尔木", "雄安",
    # Provinces and regions
    "河北", "山西", "辽宁", "吉林", "黑龙江", "江苏", "浙江", "安徽", "福建", "江西",
    "山东", "河南", "湖北", "湖南", "广东", "海南", "四川", "贵州", "云南", "陕西",
    "甘肃", "青海", "台湾", "内蒙古", "广西", "西藏", "宁夏", "新疆",
    # Countries
    "中国", "美国", "日本", "韩国", "英国", "法国", "德国", "意大利", "俄罗斯", "加拿大",
    "澳大利亚", "巴西", "印度", "新加坡", "泰国", "越南", "马来西亚", "朝鲜", "蒙古",
    "菲律宾", "印度尼西亚", "柬埔寨", "老挝", "缅甸", "尼泊尔", "巴基斯坦", "孟加拉",
    "斯里兰卡", "伊朗", "伊拉克", "沙特阿拉伯", "以色列", "土耳其", "埃及", "南非",
    "尼日利亚", "肯尼亚", "埃塞俄比亚", "摩洛哥", "西班牙", "葡萄牙", "荷兰", "比利时",
    "瑞士", "瑞典", "挪威", "丹麦", "芬兰", "波兰", "奥地利", "希腊", "乌克兰", "爱尔兰",
    "冰岛", "捷克", "匈牙利", "墨西哥", "阿根廷", "智利", "秘鲁", "哥伦比亚", "古巴",
    "新西兰",
    # World cities
    "纽约", "伦敦", "巴黎", "东京", "首尔", "柏林", "罗马", "莫斯科", "悉尼", "洛杉矶",
    "旧金山", "华盛顿", "芝加哥", "多伦多", "温哥华", "曼谷", "迪拜", "开罗", "大阪",
    "京都", "维也纳", "阿姆斯特丹", "马德里", "巴塞罗那", "日内瓦", "苏黎世", "布鲁塞尔",
    "雅典", "伊斯坦布尔", "孟买", "新德里", "雅加达", "吉隆坡", "马尼拉", "河内", "胡志明市",
    # Landmarks and scenic areas
    "长城", "故宫", "天坛", "颐和园", "圆明园", "兵马俑", "敦煌", "泰山", "华山", "黄山",
    "峨眉山", "九寨沟", "张家界", "桂林", "丽江", "三亚", "布达拉宫", "少林寺", "莫高窟",
    "乐山大佛", "武夷山", "庐山", "衡山", "恒山", "嵩山", "五台山", "普陀山", "长白山",
    "喜马拉雅山", "珠穆朗玛峰", "昆仑山", "秦岭", "青藏高原", "黄土高原",
    "塔克拉玛干沙漠", "香格里拉", "鼓浪屿", "天安门", "富士山", "阿尔卑斯山",
    # Rivers, lakes and seas
    "西湖", "太湖", "洞庭湖", "鄱阳湖", "青海湖", "巢湖", "滇池", "洱海", "千岛湖",
    "长江", "黄河", "珠江", "松花江", "淮河", "汉江", "湘江", "赣江", "闽江", "钱塘江",
    "澜沧江", "雅鲁藏布江", "嘉陵江", "乌苏里江", "渤海", "黄海", "台湾海峡",
    "太平洋", "大西洋", "印度洋", "北冰洋", "地中海", "尼罗河", "亚马逊河",
    "密西西比河", "多瑙河", "莱茵河", "泰晤士河",
    # Continents
    "亚洲", "欧洲", "非洲", "北美洲", "南美洲", "大洋洲", "南极洲",
]))

DEFAULT_RELATION_KEYWORDS: Dict[RelationType, Tuple[str, ...]] = {
    RelationType.PART_OF: ("属于", "包含", "组成", "部分", "成员"),
    RelationType.HAS_PROPERTY: ("具有", "拥有", "特点是", "特征是", "属性"),
    RelationType.CAUSES: ("导致", "引起", "造成", "产生", "引发"),
    RelationType.CREATED: ("创建", "建立", "发明", "发现", "提出"),
    RelationType.LOCATED: ("位于", "在", "存在于", "地点"),
    RelationType.PARTICIPATED: ("参与", "参加", "出席", "加入"),
    RelationType.SIMILAR: ("相似", "类似", "相同", "一样", "同等"),
    RelationType.OPPOSITE: ("相反", "对立", "矛盾", "不同"),
    RelationType.RELATED: ("相关", "关联", "联系", "关系"),
}


@dataclass(frozen=True)
class ExtractionTables:
    """Immutable bundle of extractor configuration tables."""

    entity_patterns: Tuple[Tuple[EntityType, Tuple[Pattern, ...]], ...]
    gazetteer: Tuple[str, ...]
    relation_keywords: Tuple[Tuple[RelationType, Tuple[str, ...]], ...]

    @classmethod
    def build(
        cls,
        entity_patterns: Mapping[EntityType, Iterable[Union[str, Pattern]]],
        gazetteer: Iterable[str],
        relation_keywords: Mapping[RelationType, Iterable[str]],
    ) -> "ExtractionTables":
        """
        Build tables from plain mappings, compiling patterns.

        Raises:
            re.error: If a pattern does not compile
        """
        compiled = tuple(
            (EntityType(entity_type), tuple(re.compile(p) for p in patterns))
            for entity_type, patterns in entity_patterns.items()
        )
        keywords = tuple(
            (RelationType(relation_type), tuple(words))
            for relation_type, words in relation_keywords.items()
        )
        return cls(
            entity_patterns=compiled,
            gazetteer=tuple(dict.fromkeys(gazetteer)),
            relation_keywords=keywords,
        )

    @classmethod
    def default(cls) -> "ExtractionTables":
        return _DEFAULT_TABLES

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExtractionTables":
        """
        Build tables from a JSON-style mapping, keeping defaults for absent keys.

        Unknown entity or relation type names are skipped with a warning.

        Raises:
            re.error: If a pattern does not compile
            ValueError: If a table has the wrong shape
        """
        entity_patterns: Mapping[EntityType, Iterable[str]] = DEFAULT_ENTITY_PATTERNS
        if "entity_patterns" in data:
            entity_patterns = _parse_typed_table(data["entity_patterns"], EntityType, "entity_patterns")

        gazetteer: Iterable[str] = DEFAULT_GAZETTEER
        if "gazetteer" in data:
            raw = data["gazetteer"]
            if not isinstance(raw, list) or not all(isinstance(name, str) for name in raw):
                raise ValueError("gazetteer must be a list of strings")
            gazetteer = raw

        relation_keywords: Mapping[RelationType, Iterable[str]] = DEFAULT_RELATION_KEYWORDS
        if "relation_keywords" in data:
            relation_keywords = _parse_typed_table(
                data["relation_keywords"], RelationType, "relation_keywords"
            )

        return cls.build(entity_patterns, gazetteer, relation_keywords)


def _parse_typed_table(raw: Any, enum_cls, table_name: str) -> Dict[Any, Tuple[str, ...]]:
    if not isinstance(raw, dict):
        raise ValueError(f"{table_name} must be an object keyed by type name")
    table: Dict[Any, Tuple[str, ...]] = {}
    for type_name, values in raw.items():
        try:
            key = enum_cls(type_name)
        except ValueError:
            logger.warning(f"Skipping unknown type '{type_name}' in {table_name}")
            continue
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValueError(f"{table_name}.{type_name} must be a list of strings")
        table[key] = tuple(values)
    return table


_DEFAULT_TABLES = ExtractionTables.build(
    DEFAULT_ENTITY_PATTERNS, DEFAULT_GAZETTEER, DEFAULT_RELATION_KEYWORDS
)


def load_extraction_tables(path: Optional[Union[str, Path]] = None) -> ExtractionTables:
    """
    Load extraction tables from a JSON file with fallback to defaults.

    Args:
        path: JSON file to read. Defaults to settings.extraction_tables_path.

    Returns:
        ExtractionTables built from the file, or the defaults when no file is
        configured or the file cannot be used.
    """
    path = path or settings.extraction_tables_path
    if not path:
        return ExtractionTables.default()

    tables_path = Path(path)
    try:
        with open(tables_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        tables = ExtractionTables.from_mapping(data)
        logger.info(
            f"Loaded extraction tables from {tables_path} "
            f"({len(tables.entity_patterns)} entity types, {len(tables.gazetteer)} gazetteer names)"
        )
        return tables
    except FileNotFoundError:
        logger.warning(f"Extraction tables not found at {tables_path}, using defaults")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in extraction tables {tables_path}: {e}, using defaults")
    except re.error as e:
        logger.error(f"Invalid pattern in extraction tables {tables_path}: {e}, using defaults")
    except ValueError as e:
        logger.error(f"Malformed extraction tables {tables_path}: {e}, using defaults")
    return ExtractionTables.default()
