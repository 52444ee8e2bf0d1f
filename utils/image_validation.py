"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: utils/image_validation.py – проверка загружаемых изображений.

Назначение модуля:
- Проверка, что загруженный файл действительно является изображением допустимого формата.
- Ограничение разрешения изображения по числу пикселей.
"""

from PIL import Image, UnidentifiedImageError

from errors import ValidationError

FORMAT_TO_EXTENSION = {"jpeg": "jpg", "png": "png", "webp": "webp", "gif": "gif"}


def inspect_image(file_storage, allowed_formats, max_pixels: int) -> str:
    """Проверяет файл из request.files и возвращает расширение для хранения."""
    file_storage.stream.seek(0)
    try:
        with Image.open(file_storage.stream) as image:
            image.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError):
        raise ValidationError("Invalid image file", field="file")
    finally:
        file_storage.stream.seek(0)

    # После verify() файл нужно открыть заново
    try:
        with Image.open(file_storage.stream) as image:
            image_format = (image.format or "").lower()
            width, height = image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        raise ValidationError("Invalid image file", field="file")
    finally:
        file_storage.stream.seek(0)

    if image_format not in allowed_formats or image_format not in FORMAT_TO_EXTENSION:
        raise ValidationError("Unsupported image format", field="file")

    if width * height > max_pixels:
        raise ValidationError("Image resolution is too large", field="file")

    return FORMAT_TO_EXTENSION[image_format]
