#!/usr/bin/env python3
"""
Main entry point for the interview coach.
Allows running the package with: python -m interview_coach [serve|live]
"""
import asyncio
import logging
import os
import sys

from .config import COACH_ENDPOINT_PATH, get_config
from .utils import setup_logging

USAGE = """Usage:
  python -m interview_coach serve [--host=HOST] [--port=PORT]
  python -m interview_coach live [--video=PATH] [--name=NAME] [--no-mic] [--debug]

Live session commands:
  n            next question          e      end interview
  r            restart                s      request scores
  c <text>     chat with the coach    u <path>  use a video file
  m            toggle microphone      v      toggle camera
  q            quit
"""


def serve(config) -> None:
    """Run the coach proxy endpoint."""
    import uvicorn
    from .api import create_app

    print(f"🚀 Coach proxy listening on http://{config.server_host}:{config.server_port}")
    if not (config.gemini_api_key or config.google_cloud_project):
        print("⚠️  GEMINI_API_KEY is not set; requests will return 500")
    uvicorn.run(create_app(config), host=config.server_host, port=config.server_port,
                log_level=config.log_level.lower())


def _ask_profile(config, name_arg):
    from .infrastructure.data import ProfileStore

    store = ProfileStore(config.profile_store_path)
    if name_arg:
        return store.save(name_arg)
    profile = store.load()
    if profile is not None:
        return profile
    while True:
        name = input("👤 What's your name? ").strip()
        if name:
            return store.save(name)


def _print_question(session) -> None:
    nav = session.navigator
    print(f"\n❓ Question {nav.question_number}/{nav.question_count} "
          f"({nav.progress_percentage:.0f}%): {nav.current_question}")


async def live(config, video_path=None, name_arg=None) -> None:
    """Console interview session."""
    from .interview import InterviewSession, EventType

    profile = _ask_profile(config, name_arg)
    session = InterviewSession(config, user_name=profile.name)
    bus = session.event_bus

    bus.subscribe(EventType.TRANSCRIPT_UPDATED,
                  lambda e: print(f"   📝 {e.data['text']}") if e.data["is_final"] else None)
    bus.subscribe(EventType.TRANSCRIPTION_WARNING, lambda e: print(f"⚠️  {e.data['message']}"))
    bus.subscribe(EventType.MEDIA_ERROR, lambda e: print(f"❌ {e.data['message']}"))
    bus.subscribe(EventType.RESULTS_SHOWN, lambda e: print("\n🏁 Interview finished. Type 's' for your scores."))

    print(f"🤖 {session.chat.messages[0].content}")
    with session:
        if not session.start():
            print("📹 Camera unavailable; use 'u <path>' to answer with a video file")
        if video_path and not session.upload_video(video_path):
            print(f"❌ Not a usable video file: {video_path}")
        _print_question(session)

        loop = asyncio.get_running_loop()
        while True:
            line = (await loop.run_in_executor(None, input, "> ")).strip()
            cmd, _, arg = line.partition(" ")
            if cmd == "q":
                break
            elif cmd == "n":
                session.next_question()
                if not session.navigator.show_results:
                    _print_question(session)
            elif cmd == "e":
                session.end_interview()
            elif cmd == "r":
                session.restart()
                _print_question(session)
            elif cmd == "s":
                print("⏳ Scoring your answers...")
                card = await session.request_scores()
                if card is not None:
                    for label, score in card.as_dict().items():
                        print(f"   {label}: {score}")
                    print(f"   {card.summary}")
            elif cmd == "c":
                reply = await session.send_chat(arg)
                if reply is not None:
                    print(f"🤖 {reply.content}")
            elif cmd == "u":
                if not session.upload_video(arg):
                    print(f"❌ Not a usable video file: {arg}")
            elif cmd == "m":
                print(f"🎤 Microphone {'on' if session.toggle_mic() else 'off'}")
            elif cmd == "v":
                session.toggle_camera()
                print(f"📹 Camera {'on' if session.media.camera_enabled else 'off'}")
            elif cmd:
                print(USAGE)
            print(f"   ⏱️  {session.elapsed}")


def main():
    """Command-line interface for the interview coach."""
    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        sys.exit(0)

    config = get_config()
    command, options = args[0], args[1:]

    video_path = None
    name_arg = None
    for arg in options:
        if arg.startswith("--host="):
            config.server_host = arg.split("=", 1)[1]
        elif arg.startswith("--port="):
            try:
                config.server_port = int(arg.split("=", 1)[1])
            except ValueError:
                print("❌ Invalid port value. Use --port=8000")
                sys.exit(1)
        elif arg.startswith("--video="):
            video_path = arg.split("=", 1)[1]
        elif arg.startswith("--name="):
            name_arg = arg.split("=", 1)[1]
        elif arg == "--no-mic":
            config.mic_enabled = False
        elif arg == "--debug":
            config.log_level = "DEBUG"
        else:
            print(f"❌ Unknown option: {arg}")
            print(USAGE)
            sys.exit(1)

    if not os.getenv("COACH_ENDPOINT_URL"):
        config.coach_endpoint_url = f"http://{config.server_host}:{config.server_port}{COACH_ENDPOINT_PATH}"

    setup_logging(config.log_file, level=config.log_level,
                  console_level=logging.INFO if command == "serve" else logging.CRITICAL)

    if command == "serve":
        serve(config)
    elif command == "live":
        try:
            asyncio.run(live(config, video_path, name_arg))
        except (KeyboardInterrupt, EOFError):
            print("\n👋 Goodbye!")
    else:
        print(f"❌ Unknown command: {command}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
