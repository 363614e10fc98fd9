import asyncio
import html
import logging
from typing import Dict, List

from aiogram import Bot, Dispatcher, F, types
from aiogram.filters import CommandStart, Command
from aiogram.types import Message, BotCommand, CallbackQuery
from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.exceptions import TelegramBadRequest

from config import Config

from app.services.core.schedule_repository import ScheduleRepository
from app.services.core.schedule_session import ScheduleSession
from app.services.core.schedule_view import DayView, build_schedule_view
from app.services.utils.enums import ScheduleLoadStatus

log = logging.getLogger(__name__)

dp = Dispatcher()

# Сессии пользователей {user_id: ScheduleSession}, только в памяти
sessions: Dict[int, ScheduleSession] = {}
_repository = None

# Больше кнопок в одном сообщении не показываем, остальное - через поиск
MAX_GROUP_BUTTONS = 30

EMPTY_FAVORITES = "ℹ️ В избранном пока нет групп. Добавьте их из списка /start."


# --- ХЕЛПЕРЫ ---

def get_repository() -> ScheduleRepository:
    global _repository
    if _repository is None:
        _repository = ScheduleRepository()
    return _repository


def get_session(user_id: int) -> ScheduleSession:
    if user_id not in sessions:
        sessions[user_id] = ScheduleSession(get_repository())
    return sessions[user_id]


def build_groups_keyboard(groups: List[str], session: ScheduleSession) -> types.InlineKeyboardMarkup:
    """Клавиатура со списком групп, избранные помечены сердечком."""
    builder = InlineKeyboardBuilder()
    for group in groups[:MAX_GROUP_BUTTONS]:
        mark = "❤️ " if session.is_favorite(group) else ""
        builder.button(text=f"{mark}{group}", callback_data=f"group:{group}")
    builder.adjust(3)
    return builder.as_markup()


def build_favorites_keyboard(session: ScheduleSession) -> types.InlineKeyboardMarkup:
    """
    Клавиатура экрана избранного: в каждой строке группа (выбранная
    отмечена стрелкой) и кнопка удаления из избранного.
    """
    builder = InlineKeyboardBuilder()
    for group in session.favorites.sorted_groups():
        mark = "▶️ " if group == session.selected_group else ""
        builder.button(text=f"{mark}{group}", callback_data=f"fsel:{group}")
        builder.button(text="💔", callback_data=f"funfav:{group}")
    builder.adjust(2)
    return builder.as_markup()


def build_group_keyboard(group: str, is_favorite: bool) -> types.InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="📅 Показать расписание", callback_data=f"load:{group}")
    if is_favorite:
        builder.button(text="💔 Удалить из избранного", callback_data=f"fav:{group}")
    else:
        builder.button(text="❤️ Добавить в избранное", callback_data=f"fav:{group}")
    builder.adjust(1)
    return builder.as_markup()


def format_schedule_header(group: str, days_count: int) -> str:
    return f"📅 Расписание группы <b>{html.escape(group)}</b> · {days_count} дней"


def format_day_message(day: DayView) -> str:
    """Текст одного дня расписания в HTML-разметке Telegram."""
    lines = [f"<b>{html.escape(day.date)}</b> · {day.lessons_label}"]
    if not day.lessons:
        lines.append(day.empty_message)
    for lesson in day.lessons:
        lines.append("")
        lines.append(f"<b>{lesson.number}.</b> {html.escape(lesson.time)}")
        lines.append(html.escape(lesson.subject))
        if lesson.teacher:
            teacher = html.escape(lesson.teacher)
            if lesson.teacher_position:
                teacher += f" <i>({html.escape(lesson.teacher_position)})</i>"
            lines.append(f"👤 {teacher}")
        place = [html.escape(value) for value in (lesson.classroom, lesson.building) if value]
        if place:
            lines.append(f"📍 {', '.join(place)}")
    return "\n".join(lines)


def _group_from_callback(callback: CallbackQuery) -> str:
    return callback.data.split(':', 1)[1]


async def _replace_markup(callback: CallbackQuery, markup: types.InlineKeyboardMarkup):
    try:
        await callback.message.edit_reply_markup(reply_markup=markup)
    except TelegramBadRequest as e:
        log.warning(f"Не удалось обновить клавиатуру для {callback.from_user.id}: {e}")


async def _send_schedule(callback: CallbackQuery, session: ScheduleSession, group: str):
    """Загружает расписание выбранной группы и отправляет его по дням."""
    if session.is_loading:
        await callback.answer("⏳ Расписание уже загружается...")
        return

    await callback.answer("⏳ Загрузка расписания...")
    # Пока шёл запрос, пользователь мог переключить группу - тогда молчим
    if not await session.load_schedule_async():
        return

    if session.status == ScheduleLoadStatus.FAILED:
        await callback.message.answer(f"❌ {session.error}")
        return
    if not session.schedule:
        await callback.message.answer("📭 Расписание не найдено")
        return

    await callback.message.answer(format_schedule_header(group, len(session.schedule)), parse_mode="HTML")
    for day in build_schedule_view(session.schedule):
        await callback.message.answer(format_day_message(day), parse_mode="HTML")


# --- ОБРАБОТЧИКИ КОМАНД ---

@dp.message(CommandStart())
async def command_start_handler(message: Message):
    session = get_session(message.from_user.id)
    groups = await asyncio.to_thread(session.refresh_groups)

    if session.error:
        await message.answer(f"❌ {session.error}. Попробуйте /start позже.")
        return

    await message.answer(
        "👋 Выберите группу или напишите часть её названия для поиска.",
        reply_markup=build_groups_keyboard(groups, session)
    )


@dp.message(Command("favorites"))
async def command_favorites_handler(message: Message):
    session = get_session(message.from_user.id)
    if not session.favorites:
        await message.answer(EMPTY_FAVORITES)
        return
    await message.answer(
        f"❤️ <b>Избранные группы</b> ({len(session.favorites)})",
        parse_mode="HTML",
        reply_markup=build_favorites_keyboard(session)
    )


@dp.message(F.text)
async def search_handler(message: Message):
    session = get_session(message.from_user.id)
    if not session.groups:
        await asyncio.to_thread(session.refresh_groups)

    found = session.search_groups(message.text)
    if not found:
        await message.answer("🔍 Группы не найдены.")
        return
    await message.answer(
        f"🔍 Найдено групп: {len(found)}",
        reply_markup=build_groups_keyboard(found, session)
    )


# --- ОБРАБОТЧИКИ НАЖАТИЙ НА КНОПКИ (CALLBACKS) ---

@dp.callback_query(lambda c: c.data and c.data.startswith('group:'))
async def process_group_callback(callback: CallbackQuery):
    group = _group_from_callback(callback)
    session = get_session(callback.from_user.id)
    session.select_group(group)

    await callback.answer()
    await callback.message.answer(
        f"Группа <b>{html.escape(group)}</b>",
        parse_mode="HTML",
        reply_markup=build_group_keyboard(group, session.is_favorite(group))
    )


@dp.callback_query(lambda c: c.data and c.data.startswith('load:'))
async def process_load_callback(callback: CallbackQuery):
    group = _group_from_callback(callback)
    session = get_session(callback.from_user.id)
    session.select_group(group)
    await _send_schedule(callback, session, group)


@dp.callback_query(lambda c: c.data and c.data.startswith('fav:'))
async def process_favorite_callback(callback: CallbackQuery):
    group = _group_from_callback(callback)
    session = get_session(callback.from_user.id)

    is_favorite = session.toggle_favorite(group)
    if is_favorite:
        await callback.answer("Группа добавлена в избранное")
    else:
        await callback.answer("Группа удалена из избранного")
    await _replace_markup(callback, build_group_keyboard(group, is_favorite))


@dp.callback_query(lambda c: c.data and c.data.startswith('fsel:'))
async def process_favorite_select_callback(callback: CallbackQuery):
    """Выбор группы в избранном; повторное нажатие снимает выбор."""
    group = _group_from_callback(callback)
    session = get_session(callback.from_user.id)

    selected = session.select_group(group, toggle=True)
    await _replace_markup(callback, build_favorites_keyboard(session))
    if selected is None:
        await callback.answer("Выбор снят")
        return
    await _send_schedule(callback, session, group)


@dp.callback_query(lambda c: c.data and c.data.startswith('funfav:'))
async def process_favorite_remove_callback(callback: CallbackQuery):
    group = _group_from_callback(callback)
    session = get_session(callback.from_user.id)

    if session.is_favorite(group):
        session.toggle_favorite(group, clear_selection_on_remove=True)
    await callback.answer("Группа удалена из избранного")

    if not session.favorites:
        try:
            await callback.message.edit_text(EMPTY_FAVORITES)
        except TelegramBadRequest as e:
            log.warning(f"Не удалось обновить сообщение избранного для {callback.from_user.id}: {e}")
        return
    await _replace_markup(callback, build_favorites_keyboard(session))


# --- ФУНКЦИЯ ЗАПУСКА БОТА ---

async def set_main_menu(bot: Bot):
    """Устанавливает команды, которые будут видны в кнопке 'Меню'."""
    main_menu_commands = [
        BotCommand(command="/start", description="📋 Список групп"),
        BotCommand(command="/favorites", description="❤️ Избранные группы")
    ]
    await bot.set_my_commands(main_menu_commands)


async def main() -> None:
    """Точка входа для запуска бота."""
    logging.info("Запуск Telegram-бота...")
    bot = Bot(token=Config.TELEGRAM_BOT_TOKEN)
    await set_main_menu(bot)
    await bot.delete_webhook(drop_pending_updates=True)
    await dp.start_polling(bot)
