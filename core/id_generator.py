import random

# Двухзначные коды сущностей
TYPE_POSTFIX = {
    "users": 1,
    "photos": 3,
    "photo_likes": 4,
    "photo_statuses": 5,
    "comments": 6,
    "comment_likes": 7,
    "comment_reports": 8,
    "photo_variants": 9,
}

# 13 случайных цифр + постфикс: id остаётся меньше 2**53 и точно читается в JS
RANDOM_DIGITS = 13
MAX_RANDOM = 10 ** RANDOM_DIGITS - 1

# Сколько раз повторять вставку, если случайный id уже занят
INSERT_ATTEMPTS = 5


def generate_random_id(entity: str) -> int:
    """Возвращает id: 13 случайных цифр + 2-значный постфикс."""
    if entity not in TYPE_POSTFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    rand = random.randint(1, MAX_RANDOM)
    postfix = TYPE_POSTFIX[entity]
    return rand * 100 + postfix
