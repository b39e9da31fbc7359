"""
hskime FastAPI 服务

供浏览器端输入界面调用：拼音联想、词典搜索、光标处拼音替换
"""

import os
import time
import uuid
from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from hskime.engine import (
    DictionaryService,
    SearchResult,
    create_service,
    fetch_hanzi_suggestions,
    get_api_logger,
    get_pinyin_at_cursor,
    insert_hanzi_at_cursor,
)

# 初始化日志
logger = get_api_logger()


# ===== 请求/响应模型 =====

class ResultItem(BaseModel):
    """词条结果"""
    word: str
    pinyin: str
    meaning: List[str]
    example: Optional[str] = None
    traditional: Optional[str] = None
    score: Optional[int] = None
    matchType: Optional[str] = None
    isShorthand: bool = False
    syllableCount: int = 0

    @classmethod
    def from_result(cls, result: SearchResult) -> "ResultItem":
        return cls(**result.to_dict())


class SuggestResponse(BaseModel):
    """联想响应"""
    pinyin: str
    results: List[ResultItem]
    error: Optional[str] = None


class SearchResponse(BaseModel):
    """搜索响应"""
    query: str
    results: List[ResultItem]


class CursorRequest(BaseModel):
    """光标处拼音提取请求"""
    text: str = Field("", description="文本内容")
    cursor: int = Field(..., ge=0, description="光标位置")


class CursorToken(BaseModel):
    text: str
    start_pos: int


class CursorResponse(BaseModel):
    token: Optional[CursorToken] = None


class InsertRequest(BaseModel):
    """汉字替换请求"""
    text: str = Field("", description="文本内容")
    cursor: int = Field(..., ge=0, description="光标位置")
    start_pos: int = Field(..., ge=0, description="拼音起始位置")
    hanzi: str = Field(..., description="选中的汉字")


class InsertResponse(BaseModel):
    text: str
    cursor: int


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str
    state: str


# ===== 应用 =====

def create_app(service: DictionaryService = None) -> FastAPI:
    """
    创建应用

    Args:
        service: 字典服务（可选，默认按环境变量配置创建）
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 50)
        logger.info("hskime API 服务启动")

        svc = service or create_service()
        app.state.service = svc

        # 预热词典，失败时首次查询会重试
        state = await svc.ensure_loaded()
        logger.info(f"  词典状态: {state.value}")
        logger.info("=" * 50)

        yield

        await svc.loader.source.aclose()
        app.state.service = None
        logger.info("hskime API 服务已停止")

    app = FastAPI(
        title="hskime API",
        description="HSK 拼音输入助手 API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """记录所有请求的详细日志"""
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        query = str(request.query_params) if request.query_params else ""
        logger.info(f"[{request_id}] --> {request.method} {request.url.path} {query} | IP: {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] <-- ERROR | {elapsed_ms:.2f}ms | {type(e).__name__}: {e}")
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        log_level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
        getattr(logger, log_level)(f"[{request_id}] <-- {status_code} | {elapsed_ms:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response

    def _service(request: Request) -> DictionaryService:
        svc = getattr(request.app.state, "service", None)
        if svc is None:
            logger.error("服务未就绪，拒绝请求")
            raise HTTPException(status_code=503, detail="服务未就绪")
        return svc

    # ===== API 路由 =====

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """健康检查"""
        from hskime import __version__
        svc = getattr(request.app.state, "service", None)
        ready = svc is not None and svc.loader.is_loaded
        return HealthResponse(
            status="healthy" if ready else "not_ready",
            version=__version__,
            state=svc.state.value if svc else "unloaded",
        )

    @app.get("/suggest", response_model=SuggestResponse)
    async def suggest(request: Request, pinyin: str = Query(..., description="拼音输入")):
        """拼音 → 汉字联想（出错时返回空列表）"""
        if not pinyin.strip():
            logger.warning("无效请求: 空拼音")
            raise HTTPException(status_code=400, detail="拼音不能为空")

        result = await fetch_hanzi_suggestions(pinyin, _service(request))
        return SuggestResponse(
            pinyin=pinyin,
            results=[ResultItem.from_result(r) for r in result],
            error=result.error,
        )

    @app.get("/search", response_model=SearchResponse)
    async def search(request: Request, q: str = Query(..., description="搜索词")):
        """词典搜索"""
        if not q.strip():
            logger.warning("无效请求: 空搜索词")
            raise HTTPException(status_code=400, detail="搜索词不能为空")

        svc = _service(request)
        try:
            results = await svc.search_dictionary(q)
        except Exception as e:
            logger.error(f"词典搜索失败: q='{q}', error={e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))
        return SearchResponse(query=q, results=[ResultItem.from_result(r) for r in results])

    @app.post("/cursor/pinyin", response_model=CursorResponse)
    async def pinyin_at_cursor(body: CursorRequest):
        """提取光标前的拼音"""
        token = get_pinyin_at_cursor(body.text, body.cursor)
        if token is None:
            return CursorResponse(token=None)
        return CursorResponse(token=CursorToken(text=token.text, start_pos=token.start_pos))

    @app.post("/cursor/insert", response_model=InsertResponse)
    async def insert_at_cursor(body: InsertRequest):
        """用选中的汉字替换光标前的拼音"""
        text, cursor = insert_hanzi_at_cursor(body.text, body.cursor, body.start_pos, body.hanzi)
        return InsertResponse(text=text, cursor=cursor)

    @app.get("/stats")
    async def get_stats(request: Request):
        """获取服务统计信息"""
        stats = _service(request).get_stats()
        logger.info(f"统计查询: {stats}")
        return stats

    return app


app = create_app()


# ===== 启动入口 =====

def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"启动 hskime API 服务: http://{host}:{port}")
    logger.info(f"API 文档: http://{host}:{port}/docs")

    uvicorn.run(
        "hskime.api.server:app",
        host=host,
        port=port,
        reload=False,
        workers=1,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
