import logging
from typing import List, Sequence

from sigreport.raw import RawDataFile

logger = logging.getLogger(__name__)

SIZE_MISMATCH_MESSAGE = "Container contains a file named {name} which size does not match the declared size"


class ContainerValidator:
    """Проверка контейнера целиком; возвращает ошибки уровня контейнера."""

    def validate(self) -> List[str]:
        return []


NO_OP_VALIDATOR = ContainerValidator()


class DataFileSizeValidator(ContainerValidator):
    """Размер каждого файла данных ASiC должен совпадать с объявленным в архиве."""

    def __init__(self, data_files: Sequence[RawDataFile]):
        self.data_files = list(data_files)

    def validate(self) -> List[str]:
        errors = []
        for data_file in self.data_files:
            if data_file.declared_size is None or data_file.size is None:
                continue
            if data_file.declared_size != data_file.size:
                logger.info(
                    "Data file %r size mismatch: declared=%d actual=%d",
                    data_file.name, data_file.declared_size, data_file.size,
                )
                errors.append(SIZE_MISMATCH_MESSAGE.format(name=data_file.name))
        return errors
