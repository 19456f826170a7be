"""
词典服务模块

SKK 格式词典的加载与查询：
- okuri-nasi（无送假名）：读音 → 候选列表
- okuri-ari（有送假名）：词干读音 + 辅音符号 → 汉字词干列表
"""

import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import DictionaryLoadError
from .logging import get_engine_logger, log_execution_time

logger = get_engine_logger()


def _row(kana: str, symbol: str) -> Dict[str, str]:
    return {c: symbol for c in kana}


# 送假名首字符 → SKK 辅音符号
OKURI_SYMBOLS: Mapping[str, str] = MappingProxyType({
    # 元音行与小写元音：用假名本身
    **{c: c for c in 'あいうえおぁぃぅぇぉ'},
    **_row('かきくけこ', 'k'),
    **_row('さしすせそ', 's'),
    **_row('たちつてと', 't'),
    **_row('なにぬねの', 'n'),
    **_row('はひふへほ', 'h'),
    **_row('まみむめも', 'm'),
    **_row('やゆよゃゅょ', 'y'),
    **_row('らりるれろ', 'r'),
    **_row('わをん', 'w'),
    **_row('がぎぐげご', 'g'),
    **_row('ざじずぜぞ', 'z'),
    **_row('だぢづでど', 'd'),
    **_row('ばびぶべぼ', 'b'),
    **_row('ぱぴぷぺぽ', 'p'),
    'っ': 't',
})


def okuri_symbol(char: str) -> Optional[str]:
    """送假名首字符对应的辅音符号，无法映射时返回 None"""
    return OKURI_SYMBOLS.get(char)


class Lexicon:
    """
    只读词典

    构建后不再修改，可在请求之间共享，无需加锁。
    """

    def __init__(
        self,
        okuri_nasi: Optional[Mapping[str, Sequence[str]]] = None,
        okuri_ari: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._okuri_nasi = MappingProxyType(
            {k: tuple(v) for k, v in (okuri_nasi or {}).items()}
        )
        self._okuri_ari = MappingProxyType(
            {k: tuple(v) for k, v in (okuri_ari or {}).items()}
        )
        # 最长匹配的扫描上限
        self._max_key_length = max((len(k) for k in self._okuri_nasi), default=0)

    @classmethod
    def empty(cls) -> "Lexicon":
        """空词典（直通模式）"""
        return cls()

    def lookup(self, reading: str) -> Optional[List[str]]:
        """精确查询 okuri-nasi 词条"""
        candidates = self._okuri_nasi.get(reading)
        return list(candidates) if candidates is not None else None

    def lookup_with_fallback(self, reading: str) -> List[str]:
        """查询 okuri-nasi 词条，并把读音本身作为兜底候选"""
        result = self.lookup(reading)
        if result is None:
            return [reading]
        if reading not in result:
            result.append(reading)
        return result

    def lookup_inflected(self, stem: str, trailing_char: str) -> Optional[List[str]]:
        """
        查询 okuri-ari 词条

        Args:
            stem: 不含送假名的读音，如 "か"
            trailing_char: 送假名首字符，如 "く"

        Returns:
            汉字词干列表，如 ["書", "欠"]
        """
        symbol = okuri_symbol(trailing_char)
        if symbol is None:
            return None
        stems = self._okuri_ari.get(stem + symbol)
        return list(stems) if stems is not None else None

    def _split_okuri(self, reading: str) -> Optional[Tuple[str, str]]:
        if len(reading) < 2:
            return None
        return reading[:-1], reading[-1]

    def lookup_combined(self, reading: str) -> List[str]:
        """
        综合查询：okuri-nasi 在前，okuri-ari 在后，最后是读音本身

        "かく" → ["書く", "欠く", "かく"]
        """
        result = self.lookup(reading) or []

        split = self._split_okuri(reading)
        if split is not None:
            stem, okuri = split
            for kanji_stem in self.lookup_inflected(stem, okuri) or []:
                full_form = kanji_stem + okuri
                if full_form not in result:
                    result.append(full_form)

        if reading and reading not in result:
            result.append(reading)
        return result

    def has_candidates(self, reading: str) -> bool:
        """是否存在 okuri-nasi 或（末字作送假名的）okuri-ari 词条"""
        if reading in self._okuri_nasi:
            return True
        split = self._split_okuri(reading)
        if split is None:
            return False
        return self.lookup_inflected(*split) is not None

    def is_empty(self) -> bool:
        return not self._okuri_nasi and not self._okuri_ari

    @property
    def okuri_nasi_count(self) -> int:
        return len(self._okuri_nasi)

    @property
    def okuri_ari_count(self) -> int:
        return len(self._okuri_ari)

    @property
    def max_key_length(self) -> int:
        """okuri-nasi 读音的最大长度"""
        return self._max_key_length

    def __len__(self) -> int:
        return self.okuri_nasi_count + self.okuri_ari_count


# ===== 词典加载 =====

def decode_content(data: bytes) -> Tuple[str, str]:
    """先尝试 UTF-8（去掉 BOM），失败则按 EUC-JP 解码"""
    try:
        return data.decode('utf-8-sig'), 'UTF-8'
    except UnicodeDecodeError:
        return data.decode('euc_jp', errors='replace'), 'EUC-JP'


def parse_entry(line: str) -> Optional[Tuple[str, List[str]]]:
    """
    解析单行词条

    格式: "reading /candidate1/candidate2/.../"
    候选中 ";" 之后是注释，丢弃。
    """
    reading, sep, rest = line.partition(' ')
    if not sep:
        return None

    candidates = []
    for part in rest.split('/'):
        part = part.strip()
        if not part:
            continue
        candidate = part.split(';', 1)[0]
        if candidate:
            candidates.append(candidate)

    if not candidates:
        return None
    return reading, candidates


def parse_lines(lines: Iterable[str]) -> Lexicon:
    """按 SKK 分区解析词典内容"""
    okuri_ari: Dict[str, List[str]] = {}
    okuri_nasi: Dict[str, List[str]] = {}
    # SKK 词典以 okuri-ari 分区开头
    section = okuri_ari

    for line in lines:
        line = line.rstrip('\r\n')
        if not line:
            continue
        if line.startswith(';; okuri-ari'):
            section = okuri_ari
            continue
        if line.startswith(';; okuri-nasi'):
            section = okuri_nasi
            continue
        if line.startswith(';'):
            continue

        entry = parse_entry(line)
        if entry is not None:
            reading, candidates = entry
            section[reading] = candidates

    return Lexicon(okuri_nasi, okuri_ari)


@log_execution_time(logger)
def load_lexicon(path) -> Lexicon:
    """从文件加载词典"""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DictionaryLoadError(f"无法读取词典 {path}: {e}") from e

    content, encoding = decode_content(data)
    logger.info(f"加载词典: {path} (编码: {encoding})")

    lexicon = parse_lines(content.splitlines())
    logger.info(
        f"词典加载完成: okuri-nasi {lexicon.okuri_nasi_count} 条, "
        f"okuri-ari {lexicon.okuri_ari_count} 条"
    )
    return lexicon


def default_dictionary_paths() -> List[Path]:
    """默认词典搜索路径"""
    paths = []

    data_home = os.getenv('XDG_DATA_HOME')
    if data_home:
        paths.append(Path(data_home) / 'azuki' / 'dict' / 'SKK-JISYO.L')

    home = os.getenv('HOME')
    if home:
        paths.append(Path(home) / '.local' / 'share' / 'azuki' / 'dict' / 'SKK-JISYO.L')
        paths.append(Path(home) / '.azuki' / 'dict' / 'SKK-JISYO.L')

    paths.append(Path('/usr/share/skk/SKK-JISYO.L'))
    paths.append(Path('/usr/local/share/skk/SKK-JISYO.L'))
    return paths


def find_dictionary(explicit_path: Optional[str] = None) -> Lexicon:
    """
    按顺序查找并加载词典

    显式路径 → AZUKI_DICTIONARY → 默认路径；全部失败时返回空词典。
    """
    candidates = []
    if explicit_path:
        candidates.append(Path(explicit_path))
    env_path = os.getenv('AZUKI_DICTIONARY')
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(p for p in default_dictionary_paths() if p.exists())

    for path in candidates:
        try:
            return load_lexicon(path)
        except DictionaryLoadError as e:
            logger.error(f"词典加载失败: {e}")

    logger.warning("未找到词典，使用假名直通模式")
    return Lexicon.empty()
